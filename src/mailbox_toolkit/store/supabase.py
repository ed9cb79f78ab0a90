"""
Module: store.supabase

Purpose:
    RecordStore backed by a hosted Postgres database through its PostgREST
    interface (``/rest/v1``). Uses the signed-in session's access token when
    an AuthProvider is given, the anonymous key otherwise.

Key Classes:
    - SupabaseRecordStore: Hosted RecordStore

Error mapping:
    - HTTP 401, or PostgREST codes PGRST301/PGRST302, or any error message
      mentioning "JWT" -> AuthenticationExpired
    - Other non-2xx responses, transport failures and malformed rows
      -> DataAccessError (status code kept when there was a response)

Dependencies:
    - httpx: Async HTTP client
    - core.schemas: Row validation (jsonschema)

Used By:
    - cli / gui: When the configured source is "supabase"
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

import httpx

from mailbox_toolkit.auth.provider import AuthProvider
from mailbox_toolkit.core.errors import AuthenticationExpired, DataAccessError
from mailbox_toolkit.core.models import Building, Resident
from mailbox_toolkit.core.schemas import validate_rows
from mailbox_toolkit.core.utils.serialization import (
    deserialize_building,
    deserialize_resident,
    serialize_new_resident,
    serialize_update,
)
from mailbox_toolkit.store.base import RecordStore

logger = logging.getLogger(__name__)

REST_PREFIX = "/rest/v1"
BUILDINGS_TABLE = "buildings"
RESIDENTS_TABLE = "residents"

JWT_ERROR_CODES = frozenset({"PGRST301", "PGRST302"})


def _is_auth_failure(response: httpx.Response, body: Any) -> bool:
    if response.status_code == 401:
        return True
    if isinstance(body, dict):
        if body.get("code") in JWT_ERROR_CODES:
            return True
        if "JWT" in str(body.get("message", "")):
            return True
    return False


class SupabaseRecordStore(RecordStore):
    """
    PostgREST record store.

    Args:
        url: Project URL, e.g. ``https://abc.supabase.co``
        api_key: Anonymous (public) API key
        auth: Provider whose access token authorizes requests
        timeout: Request timeout in seconds
        transport: Optional httpx transport (tests pass ``httpx.MockTransport``)

    Example:
        >>> store = SupabaseRecordStore(url, key, auth=auth)
        >>> residents = asyncio.run(store.fetch_residents(1))
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        *,
        auth: Optional[AuthProvider] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not url:
            raise ValueError("url is required")
        if not api_key:
            raise ValueError("api_key is required")
        self._url = url.rstrip("/")
        self._api_key = api_key
        self._auth = auth
        self._timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        token = (self._auth.access_token if self._auth else None) or self._api_key
        return {
            "apikey": self._api_key,
            "Authorization": f"Bearer {token}",
        }

    async def _request(
        self,
        method: str,
        table: str,
        *,
        params: Optional[dict[str, str]] = None,
        json: Any = None,
        return_rows: bool = False,
    ) -> Any:
        """
        Send one request and return the decoded body (None when empty).

        Raises:
            AuthenticationExpired: Token rejected
            DataAccessError: Any other failure
        """
        headers = self._headers()
        if return_rows:
            headers["Prefer"] = "return=representation"
        try:
            async with httpx.AsyncClient(
                base_url=self._url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(
                    method,
                    f"{REST_PREFIX}/{table}",
                    params=params,
                    json=json,
                    headers=headers,
                )
        except httpx.HTTPError as e:
            logger.error(f"{method} {table} failed: {e}")
            raise DataAccessError(f"{method} {table} failed: {e}") from e

        try:
            body = response.json() if response.content else None
        except ValueError:
            body = None

        if response.is_error:
            if _is_auth_failure(response, body):
                logger.warning(f"{method} {table}: session rejected ({response.status_code})")
                raise AuthenticationExpired(f"Session rejected by backend ({response.status_code})")
            detail = body.get("message") if isinstance(body, dict) else response.text
            logger.error(f"{method} {table} returned HTTP {response.status_code}: {detail}")
            raise DataAccessError(
                f"{method} {table} returned HTTP {response.status_code}: {detail}",
                status_code=response.status_code,
            )
        return body

    # ─────────────────────────────────────────────────────────────────────────
    # RecordStore
    # ─────────────────────────────────────────────────────────────────────────

    async def fetch_buildings(self) -> list[Building]:
        rows = await self._request(
            "GET", BUILDINGS_TABLE, params={"select": "*", "order": "id"}
        ) or []
        validate_rows(rows, "building")
        buildings = [deserialize_building(row, validate=False) for row in rows]
        logger.info(f"Fetched {len(buildings)} buildings")
        return buildings

    async def fetch_residents(self, building_id: int) -> list[Resident]:
        rows = await self._request(
            "GET",
            RESIDENTS_TABLE,
            params={
                "select": "*",
                "building_id": f"eq.{building_id}",
                "order": "name",
            },
        ) or []
        validate_rows(rows, "resident")
        residents = [deserialize_resident(row, validate=False) for row in rows]
        logger.info(f"Fetched {len(residents)} residents for building {building_id}")
        return residents

    async def create_resident(self, resident: Resident) -> Resident:
        created = await self.create_many_residents([resident])
        return created[0]

    async def create_many_residents(self, residents: Sequence[Resident]) -> list[Resident]:
        if not residents:
            return []
        try:
            payload = [serialize_new_resident(r) for r in residents]
        except ValueError as e:
            raise DataAccessError(str(e)) from e
        rows = await self._request(
            "POST", RESIDENTS_TABLE, json=payload, return_rows=True
        ) or []
        validate_rows(rows, "resident")
        if len(rows) != len(payload):
            raise DataAccessError(
                f"Inserted {len(payload)} residents but {len(rows)} were returned"
            )
        logger.info(f"Created {len(rows)} residents")
        return [deserialize_resident(row, validate=False) for row in rows]

    async def update_resident(self, resident_id: int, fields: Mapping[str, Any]) -> Resident:
        rows = await self._request(
            "PATCH",
            RESIDENTS_TABLE,
            params={"id": f"eq.{resident_id}"},
            json=serialize_update(fields),
            return_rows=True,
        ) or []
        if not rows:
            raise DataAccessError(f"Resident {resident_id} not found", status_code=404)
        return deserialize_resident(rows[0])

    async def delete_resident(self, resident_id: int) -> None:
        rows = await self._request(
            "DELETE",
            RESIDENTS_TABLE,
            params={"id": f"eq.{resident_id}"},
            return_rows=True,
        ) or []
        if not rows:
            raise DataAccessError(f"Resident {resident_id} not found", status_code=404)
        logger.info(f"Deleted resident {resident_id}")
