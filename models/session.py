"""
Authenticated session models.

AuthState is a pure state sink: the authentication collaborator produces a
user and a token, and AuthState records them. It performs no network calls
and cannot fail.

Persistence:
    The whole session is stored as a single record under the fixed key
    ``auth-storage`` in a mapping-like storage object (the Flask session in
    the web app, core.storage.JsonFileStorage elsewhere). The record is
    written on every mutation and read once when the AuthState is built.

Derived flags:
    ``is_authenticated`` and ``is_admin`` are recomputed from ``user`` and
    ``token`` on every assignment and have no setters.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from logging_config import get_logger


logger = get_logger(__name__)

AUTH_STORAGE_KEY = "auth-storage"

ADMIN_ROLE = "Admin"


@dataclass(frozen=True)
class User:
    """Identity of the signed-in customer or administrator."""

    id: Any
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    role: str = "Customer"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the collaborator's JSON shape (also the persisted shape)."""
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "role": self.role,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        """Create from collaborator JSON or a persisted record."""
        return cls(
            id=data.get("id"),
            first_name=data.get("firstName", data.get("first_name", "")) or "",
            last_name=data.get("lastName", data.get("last_name", "")) or "",
            email=data.get("email", "") or "",
            role=data.get("role", "Customer") or "Customer",
        )


@dataclass(frozen=True)
class AuthResult:
    """What the authentication collaborator hands back on success."""

    user: User
    token: str

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "AuthResult":
        """
        Parse an auth response.

        The collaborator answers either with the user object carrying an
        embedded ``token`` or with ``{"user": {...}, "token": "..."}``.
        """
        user_data = data.get("user") if isinstance(data.get("user"), dict) else data
        return cls(user=User.from_dict(user_data), token=data.get("token", ""))


class AuthState:
    """
    The authenticated session held across page loads.

    Attributes:
        user: Signed-in user, or None
        token: Bearer token, or None
        is_authenticated: user and token both present (derived)
        is_admin: user.role == "Admin" (derived)
    """

    def __init__(self, storage=None):
        """
        Build the session, restoring it from ``storage`` when a record exists.

        Args:
            storage: Mapping-like object supporting get(), item assignment and
                pop(). None keeps the session in memory only.
        """
        self._storage = storage
        self._user: Optional[User] = None
        self._token: Optional[str] = None
        self._restore()

    # ------------------------------------------------------------------
    # Derived reads
    # ------------------------------------------------------------------

    @property
    def user(self) -> Optional[User]:
        return self._user

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None and self._token is not None

    @property
    def is_admin(self) -> bool:
        return self._user is not None and self._user.role == ADMIN_ROLE

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def login(self, user_data: Union[User, Dict[str, Any]], token: str) -> None:
        """Replace the session wholesale and persist it."""
        self._set(_coerce_user(user_data), token)
        self._persist()
        if self._user is not None:
            logger.info(f"Session started for user {self._user.id} (admin={self.is_admin})")

    def logout(self) -> None:
        """Reset to logged-out defaults and clear the persisted record."""
        user_id = self._user.id if self._user else None
        self._set(None, None)
        if self._storage is not None:
            self._storage.pop(AUTH_STORAGE_KEY, None)
        if user_id is not None:
            logger.info(f"Session ended for user {user_id}")

    def update_user(self, user_data: Union[User, Dict[str, Any]]) -> None:
        """Replace the user only; the token is left as is."""
        self._set(_coerce_user(user_data), self._token)
        self._persist()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _set(self, user: Optional[User], token: Optional[str]) -> None:
        # Single assignment path; the derived flags read from these two fields
        self._user = user
        self._token = token

    def to_dict(self) -> Dict[str, Any]:
        """The persisted session record."""
        return {
            "user": self._user.to_dict() if self._user else None,
            "token": self._token,
            "isAuthenticated": self.is_authenticated,
            "isAdmin": self.is_admin,
        }

    def _persist(self) -> None:
        if self._storage is not None:
            self._storage[AUTH_STORAGE_KEY] = self.to_dict()

    def _restore(self) -> None:
        if self._storage is None:
            return

        record = self._storage.get(AUTH_STORAGE_KEY)
        if not isinstance(record, dict):
            return

        user_data = record.get("user")
        token = record.get("token")
        user = User.from_dict(user_data) if isinstance(user_data, dict) else None

        # Stored isAuthenticated/isAdmin are ignored: the flags are derived
        self._set(user, token)


def _coerce_user(user_data: Union[User, Dict[str, Any], None]) -> Optional[User]:
    if user_data is None or isinstance(user_data, User):
        return user_data
    return User.from_dict(user_data)
