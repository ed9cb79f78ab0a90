"""
Tests for the read-only spreadsheet source.
"""

import asyncio

import httpx
import pytest

from mailbox_toolkit.core.errors import DataAccessError
from mailbox_toolkit.core.models import Building, Resident
from mailbox_toolkit.store import SheetsResidentSource

SHEET_ID = "sheet-123"

METADATA = {"sheets": [{"properties": {"title": "Hátún 10"}}, {"properties": {"title": "Þórsgata 5"}}]}
VALUES = {
    "values": [
        ["name", "apartmentNumber", "priority"],
        ["Jón", "101", "1"],
        ["Anna", "101", ""],
    ]
}


def _source(handler):
    return SheetsResidentSource(SHEET_ID, "key", transport=httpx.MockTransport(handler))


def _handler(requests):
    def handle(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if "/values/" in request.url.path:
            return httpx.Response(200, json=VALUES)
        return httpx.Response(200, json=METADATA)
    return handle


class TestSheetsResidentSource:
    """Tests for SheetsResidentSource."""

    def test_not_writable(self):
        assert SheetsResidentSource.writable is False

    def test_sheets_become_buildings(self):
        source = _source(_handler([]))
        assert asyncio.run(source.fetch_buildings()) == [
            Building(0, "Hátún 10"),
            Building(1, "Þórsgata 5"),
        ]

    def test_fetch_residents_reads_titled_sheet(self):
        requests = []
        source = _source(_handler(requests))
        residents = asyncio.run(source.fetch_residents(1))

        assert [(r.name, r.priority) for r in residents] == [("Jón", 1), ("Anna", None)]
        assert requests[-1].url.path.endswith("/values/Þórsgata 5")
        assert requests[-1].url.params["key"] == "key"

    def test_titles_cached_after_fetch_buildings(self):
        requests = []
        source = _source(_handler(requests))

        async def scenario():
            await source.fetch_buildings()
            await source.fetch_residents(0)

        asyncio.run(scenario())
        assert len(requests) == 2

    def test_unknown_sheet_index(self):
        source = _source(_handler([]))
        with pytest.raises(DataAccessError) as exc_info:
            asyncio.run(source.fetch_residents(5))
        assert exc_info.value.status_code == 404

    def test_http_error(self):
        source = _source(lambda request: httpx.Response(403, json={}))
        with pytest.raises(DataAccessError) as exc_info:
            asyncio.run(source.fetch_buildings())
        assert exc_info.value.status_code == 403

    @pytest.mark.parametrize(
        "operation, args",
        [
            ("create_resident", (Resident("A", "1"),)),
            ("create_many_residents", ([Resident("A", "1")],)),
            ("update_resident", (1, {"priority": 0})),
            ("delete_resident", (1,)),
        ],
    )
    def test_writes_rejected(self, operation, args):
        source = _source(_handler([]))
        with pytest.raises(DataAccessError):
            asyncio.run(getattr(source, operation)(*args))

    @pytest.mark.parametrize("spreadsheet_id, key", [("", "key"), (SHEET_ID, "")])
    def test_required_settings(self, spreadsheet_id, key):
        with pytest.raises(ValueError):
            SheetsResidentSource(spreadsheet_id, key)
