"""
Read-only spreadsheet source.

Each sheet (tab) of a Google spreadsheet is one building, identified by its
position; rows carry the header ``name, apartmentNumber, priority``.
Residents read this way have no id and no building, so they can be
printed but not edited or reordered.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence
from urllib.parse import quote

import httpx

from mailbox_toolkit.core.errors import DataAccessError
from mailbox_toolkit.core.models import Building, Resident
from mailbox_toolkit.core.utils.serialization import (
    buildings_from_sheet_titles,
    residents_from_sheet_values,
)
from mailbox_toolkit.store.base import RecordStore

logger = logging.getLogger(__name__)

SHEETS_API_URL = "https://sheets.googleapis.com"
READ_ONLY_MESSAGE = "Spreadsheet source is read-only"


class SheetsResidentSource(RecordStore):
    """
    RecordStore over the Google Sheets v4 REST API (API key access).

    Sheet titles are cached by ``fetch_buildings`` and looked up again
    when ``fetch_residents`` is called for an unknown index.
    """

    writable = False

    def __init__(
        self,
        spreadsheet_id: str,
        api_key: str,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        base_url: str = SHEETS_API_URL,
    ):
        if not spreadsheet_id:
            raise ValueError("spreadsheet_id is required")
        if not api_key:
            raise ValueError("api_key is required")
        self._spreadsheet_id = spreadsheet_id
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport
        self._base_url = base_url
        self._titles: list[str] = []

    async def _get(self, path: str, params: Optional[dict[str, str]] = None) -> dict[str, Any]:
        query = {"key": self._api_key, **(params or {})}
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.get(path, params=query)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(f"Spreadsheet request returned HTTP {status}")
            raise DataAccessError(
                f"Spreadsheet request returned HTTP {status}", status_code=status
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Spreadsheet request failed: {e}")
            raise DataAccessError(f"Spreadsheet request failed: {e}") from e

    async def _sheet_titles(self) -> list[str]:
        body = await self._get(
            f"/v4/spreadsheets/{self._spreadsheet_id}",
            {"fields": "sheets.properties.title"},
        )
        self._titles = [
            sheet.get("properties", {}).get("title", "")
            for sheet in body.get("sheets", [])
        ]
        return self._titles

    async def fetch_buildings(self) -> list[Building]:
        titles = await self._sheet_titles()
        logger.info(f"Found {len(titles)} sheets")
        return buildings_from_sheet_titles(titles)

    async def fetch_residents(self, building_id: int) -> list[Resident]:
        titles = self._titles
        if not 0 <= building_id < len(titles):
            titles = await self._sheet_titles()
        if not 0 <= building_id < len(titles):
            raise DataAccessError(f"No sheet with index {building_id}", status_code=404)

        sheet = quote(titles[building_id], safe="")
        body = await self._get(f"/v4/spreadsheets/{self._spreadsheet_id}/values/{sheet}")
        residents = residents_from_sheet_values(body.get("values", []))
        logger.info(f"Read {len(residents)} residents from sheet {titles[building_id]!r}")
        return residents

    async def create_resident(self, resident: Resident) -> Resident:
        raise DataAccessError(READ_ONLY_MESSAGE)

    async def create_many_residents(self, residents: Sequence[Resident]) -> list[Resident]:
        raise DataAccessError(READ_ONLY_MESSAGE)

    async def update_resident(self, resident_id: int, fields: Mapping[str, Any]) -> Resident:
        raise DataAccessError(READ_ONLY_MESSAGE)

    async def delete_resident(self, resident_id: int) -> None:
        raise DataAccessError(READ_ONLY_MESSAGE)
