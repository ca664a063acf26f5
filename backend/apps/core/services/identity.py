"""Viewer identity resolution for authenticated users and anonymous guests."""

from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Union

from django.conf import settings

from apps.core import models

if TYPE_CHECKING:  # pragma: no cover - typing only
    from apps.core.services.auth import AuthProvider

logger = logging.getLogger(__name__)

DEFAULT_GUEST_SESSION_KEY = "showrate_guest_id"


@dataclass(frozen=True)
class Authenticated:
    """Viewer signed in through the auth provider."""

    user_id: int

    @property
    def owner_filter(self) -> dict[str, object]:
        return {"user_id": self.user_id, "guest_id__isnull": True}

    @property
    def owner_fields(self) -> dict[str, object]:
        return {"user_id": self.user_id, "guest_id": None}

    @property
    def distinct_id(self) -> str:
        return f"user:{self.user_id}"


@dataclass(frozen=True)
class Anonymous:
    """Viewer identified only by a locally persisted guest id."""

    guest_id: uuid.UUID

    @property
    def owner_filter(self) -> dict[str, object]:
        return {"guest_id": self.guest_id, "user_id__isnull": True}

    @property
    def owner_fields(self) -> dict[str, object]:
        return {"user_id": None, "guest_id": self.guest_id}

    @property
    def distinct_id(self) -> str:
        return f"guest:{self.guest_id}"


Identity = Union[Authenticated, Anonymous]


class IdentityStore(ABC):
    """Persistent client-side slot holding the guest id."""

    @abstractmethod
    def get(self) -> Optional[str]: ...

    @abstractmethod
    def set(self, value: str) -> None: ...

    @abstractmethod
    def clear(self) -> None: ...


class InMemoryIdentityStore(IdentityStore):
    """Identity store backed by a plain attribute; used in tests and scripts."""

    def __init__(self, value: Optional[str] = None) -> None:
        self._value = value

    def get(self) -> Optional[str]:
        return self._value

    def set(self, value: str) -> None:
        self._value = value

    def clear(self) -> None:
        self._value = None


class SessionIdentityStore(IdentityStore):
    """Identity store persisted in the Django session of the current browser."""

    def __init__(self, session, key: Optional[str] = None) -> None:
        self._session = session
        self._key = key or getattr(settings, "GUEST_SESSION_KEY", DEFAULT_GUEST_SESSION_KEY)

    def get(self) -> Optional[str]:
        return self._session.get(self._key)

    def set(self, value: str) -> None:
        self._session[self._key] = value

    def clear(self) -> None:
        self._session.pop(self._key, None)


def _parse_guest_id(raw: Optional[str]) -> Optional[uuid.UUID]:
    if not raw:
        return None
    try:
        return uuid.UUID(str(raw))
    except ValueError:
        logger.warning("Discarding malformed guest id %r", raw)
        return None


def peek_guest_id(identity_store: IdentityStore) -> Optional[uuid.UUID]:
    """Return the stored guest id without creating one."""

    return _parse_guest_id(identity_store.get())


def get_or_create_guest_id(identity_store: IdentityStore) -> uuid.UUID:
    """Read the guest id from the store, generating and persisting a fresh one on first use."""

    guest_id = peek_guest_id(identity_store)
    if guest_id is None:
        guest_id = uuid.uuid4()
        identity_store.set(str(guest_id))
        logger.debug("Issued new guest id %s", guest_id)
    return guest_id


def resolve_identity(*, auth_provider: "AuthProvider", identity_store: IdentityStore) -> Identity:
    """Return the active viewer identity; falls back to a guest and never raises."""

    try:
        authenticated = auth_provider.current_identity()
    except Exception as exc:  # pragma: no cover - provider failure path
        logger.warning("Auth provider lookup failed (%s); continuing as guest", exc)
        authenticated = None

    if authenticated is not None:
        return authenticated
    return Anonymous(guest_id=get_or_create_guest_id(identity_store))


def ensure_guest_exists(guest_id: uuid.UUID) -> models.Guest:
    """Register the guest row referenced by guest-owned evaluations."""

    guest, created = models.Guest.objects.get_or_create(id=guest_id)
    if created:
        logger.info("Registered guest %s", guest_id)
    return guest


__all__ = [
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
]
