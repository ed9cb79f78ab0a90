"""
Supabase (GoTrue) authentication.

Email/password sign-in against ``/auth/v1/token?grant_type=password``.
Rejected credentials return None; unreachable or failing backends raise
DataAccessError so the login dialog can tell the two apart.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from mailbox_toolkit.auth.provider import AuthProvider, Session, User
from mailbox_toolkit.core.errors import DataAccessError

logger = logging.getLogger(__name__)

TOKEN_PATH = "/auth/v1/token"
LOGOUT_PATH = "/auth/v1/logout"


class SupabaseAuthProvider(AuthProvider):
    """
    GoTrue password authentication.

    Args:
        url: Project URL, e.g. ``https://abc.supabase.co``
        api_key: Anonymous (public) API key
        timeout: Request timeout in seconds
        transport: Optional httpx transport (tests pass ``httpx.MockTransport``)
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__()
        self._url = url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._url,
            timeout=self._timeout,
            transport=self._transport,
            headers={"apikey": self._api_key},
        )

    async def _sign_in(self, email: str, password: str) -> Optional[Session]:
        try:
            async with self._client() as client:
                response = await client.post(
                    TOKEN_PATH,
                    params={"grant_type": "password"},
                    json={"email": email, "password": password},
                )
        except httpx.HTTPError as e:
            raise DataAccessError(f"Sign-in request failed: {e}") from e

        if response.status_code in (400, 401, 422):
            return None
        if response.is_error:
            raise DataAccessError(
                f"Sign-in failed with HTTP {response.status_code}",
                status_code=response.status_code,
            )

        body = response.json()
        user = body.get("user") or {}
        token = body.get("access_token")
        if not token:
            raise DataAccessError("Sign-in response had no access token")
        return Session(
            user=User(id=str(user.get("id", "")), email=str(user.get("email", email))),
            access_token=token,
        )

    async def _sign_out(self, session: Session) -> None:
        try:
            async with self._client() as client:
                response = await client.post(
                    LOGOUT_PATH,
                    headers={"Authorization": f"Bearer {session.access_token}"},
                )
        except httpx.HTTPError as e:
            logger.warning(f"Sign-out request failed: {e}")
            return
        if response.is_error and response.status_code != 401:
            logger.warning(f"Sign-out returned HTTP {response.status_code}")
