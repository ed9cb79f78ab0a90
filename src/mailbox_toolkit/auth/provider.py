"""
Module: auth.provider

Purpose:
    Session handling shared by every authentication backend. A provider
    holds at most one session; the record store reads its access token and
    the workflow layer gates every backend operation on it.

Key Classes:
    - User: Signed-in administrator
    - AuthProvider: Abstract provider with session state
    - StaticAuthProvider: Fixed credential list (offline demo, tests)

Key Functions:
    - require_authenticated(): Gate for backend operations

Used By:
    - store.supabase: Bearer token
    - workflow: Auth gate before store calls
    - gui.widgets.login_dialog
"""

from __future__ import annotations

import logging
import secrets
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Mapping, Optional

from mailbox_toolkit.core.errors import AuthenticationExpired

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class User:
    """Signed-in administrator."""

    id: str
    email: str


@dataclass(frozen=True)
class Session:
    user: User
    access_token: str


class AuthProvider(ABC):
    """
    Abstract authentication provider.

    Subclasses implement ``_sign_in`` and ``_sign_out``; session state and
    change notification live here.

    Example:
        >>> auth = StaticAuthProvider({"admin@example.is": "secret"})
        >>> asyncio.run(auth.login("admin@example.is", "secret"))
        User(id='admin@example.is', email='admin@example.is')
        >>> auth.is_authenticated
        True
    """

    def __init__(self) -> None:
        self._session: Optional[Session] = None
        self._listeners: list[Callable[[Optional[User]], None]] = []

    # ─────────────────────────────────────────────────────────────────────────
    # Backend hooks
    # ─────────────────────────────────────────────────────────────────────────

    @abstractmethod
    async def _sign_in(self, email: str, password: str) -> Optional[Session]:
        """Return a session, or None if the credentials were rejected."""

    @abstractmethod
    async def _sign_out(self, session: Session) -> None:
        """Revoke ``session`` on the backend."""

    # ─────────────────────────────────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────────────────────────────────

    async def login(self, email: str, password: str) -> Optional[User]:
        """
        Sign in with email and password.

        Returns:
            The signed-in User, or None if the credentials were rejected

        Raises:
            DataAccessError: If the backend could not be reached
        """
        session = await self._sign_in(email.strip(), password)
        if session is None:
            logger.warning(f"Login rejected for {email.strip()}")
            return None
        self._set_session(session)
        logger.info(f"Signed in as {session.user.email}")
        return session.user

    async def logout(self) -> None:
        """Sign out. The local session is cleared even if revocation fails."""
        session = self._session
        if session is None:
            return
        try:
            await self._sign_out(session)
        finally:
            self._set_session(None)
            logger.info(f"Signed out {session.user.email}")

    def expire_session(self) -> None:
        """Drop the session after the backend rejected its token."""
        if self._session is not None:
            logger.warning(f"Session for {self._session.user.email} expired")
        self._set_session(None)

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    @property
    def current_user(self) -> Optional[User]:
        return self._session.user if self._session else None

    @property
    def access_token(self) -> Optional[str]:
        return self._session.access_token if self._session else None

    def add_listener(self, callback: Callable[[Optional[User]], None]) -> None:
        """Call ``callback(user_or_none)`` whenever the session changes."""
        self._listeners.append(callback)

    def _set_session(self, session: Optional[Session]) -> None:
        changed = session != self._session
        self._session = session
        if changed:
            user = session.user if session else None
            for callback in list(self._listeners):
                callback(user)


class StaticAuthProvider(AuthProvider):
    """
    Provider backed by a fixed email -> password mapping.

    Used by the offline demo and the test suite. Tokens are random and
    only meaningful to this process.
    """

    def __init__(self, credentials: Mapping[str, str]):
        super().__init__()
        self._credentials = {email.lower(): pw for email, pw in credentials.items()}

    @classmethod
    def signed_in(cls, email: str = "anonymous") -> StaticAuthProvider:
        """Provider with a session already open, for sources without accounts."""
        provider = cls({})
        provider._set_session(Session(User(id=email, email=email), secrets.token_urlsafe(24)))
        return provider

    async def _sign_in(self, email: str, password: str) -> Optional[Session]:
        expected = self._credentials.get(email.lower())
        if expected is None or not secrets.compare_digest(expected, password):
            return None
        return Session(User(id=email.lower(), email=email), secrets.token_urlsafe(24))

    async def _sign_out(self, session: Session) -> None:
        return None


def require_authenticated(auth: AuthProvider) -> User:
    """
    Return the current user or fail.

    Raises:
        AuthenticationExpired: If nobody is signed in
    """
    user = auth.current_user
    if user is None:
        raise AuthenticationExpired("Not signed in")
    return user
