"""Authentication provider abstraction backed by django.contrib.auth."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from django.contrib.auth import authenticate, get_user_model, login, logout
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.db import IntegrityError, transaction

from .identity import Authenticated, Identity, SessionIdentityStore, resolve_identity

logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    """Outcome of a sign-up or sign-in attempt; errors are opaque user-facing messages."""

    identity: Optional[Authenticated]
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.identity is not None and self.error is None


class AuthProvider(ABC):
    """Issues and inspects authenticated identities."""

    @abstractmethod
    def sign_up(self, email: str, password: str) -> AuthResult: ...

    @abstractmethod
    def sign_in(self, email: str, password: str) -> AuthResult: ...

    @abstractmethod
    def current_identity(self) -> Optional[Authenticated]: ...

    @abstractmethod
    def sign_out(self) -> None: ...


class DjangoAuthProvider(AuthProvider):
    """Session-based auth provider for a single request."""

    def __init__(self, request) -> None:
        self._request = request

    def sign_up(self, email: str, password: str) -> AuthResult:
        email = (email or "").strip().lower()
        try:
            validate_email(email)
        except ValidationError:
            return AuthResult(identity=None, error="Invalid email address")

        user_model = get_user_model()
        if user_model.objects.filter(username=email).exists():
            return AuthResult(identity=None, error="User already registered")

        candidate = user_model(username=email, email=email)
        try:
            validate_password(password, user=candidate)
        except ValidationError as exc:
            return AuthResult(identity=None, error=" ".join(exc.messages))

        try:
            with transaction.atomic():
                user = user_model.objects.create_user(username=email, email=email, password=password)
        except IntegrityError:
            return AuthResult(identity=None, error="User already registered")

        login(self._request, user)
        logger.info("Signed up user %s", user.pk)
        return AuthResult(identity=Authenticated(user_id=user.pk))

    def sign_in(self, email: str, password: str) -> AuthResult:
        email = (email or "").strip().lower()
        user = authenticate(self._request, username=email, password=password)
        if user is None:
            return AuthResult(identity=None, error="Invalid login credentials")

        login(self._request, user)
        logger.info("Signed in user %s", user.pk)
        return AuthResult(identity=Authenticated(user_id=user.pk))

    def current_identity(self) -> Optional[Authenticated]:
        user = getattr(self._request, "user", None)
        if user is not None and user.is_authenticated:
            return Authenticated(user_id=user.pk)
        return None

    def sign_out(self) -> None:
        logout(self._request)


def resolve_request_identity(request) -> Identity:
    """Resolve the viewer behind a Django request (session user, else session guest)."""

    return resolve_identity(
        auth_provider=DjangoAuthProvider(request),
        identity_store=SessionIdentityStore(request.session),
    )


__all__ = ["AuthProvider", "AuthResult", "DjangoAuthProvider", "resolve_request_identity"]
