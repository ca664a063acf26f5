"""Service layer helpers for the core app."""

from .auth import AuthProvider, AuthResult, DjangoAuthProvider, resolve_request_identity
from .identity import (
    Anonymous,
    Authenticated,
    Identity,
    IdentityStore,
    InMemoryIdentityStore,
    SessionIdentityStore,
    ensure_guest_exists,
    get_or_create_guest_id,
    peek_guest_id,
    resolve_identity,
)
from .rate_limits import (
    InMemoryRateLimiter,
    RateLimitConfig,
    RateLimitExceeded,
    RedisRateLimiter,
    get_rate_limiter,
)

__all__ = [
    "AuthProvider",
    "AuthResult",
    "DjangoAuthProvider",
    "resolve_request_identity",
    "Anonymous",
    "Authenticated",
    "Identity",
    "IdentityStore",
    "InMemoryIdentityStore",
    "SessionIdentityStore",
    "ensure_guest_exists",
    "get_or_create_guest_id",
    "peek_guest_id",
    "resolve_identity",
    "InMemoryRateLimiter",
    "RedisRateLimiter",
    "RateLimitConfig",
    "RateLimitExceeded",
    "get_rate_limiter",
]
