"""
In-memory record store.

Backs the offline demo and the test suite. Behaves like the hosted store
(ids assigned on insert, residents returned ordered by name, unknown ids
reported as DataAccessError) and can be told to fail specific operations.

Example:
    >>> store = InMemoryRecordStore([Building(1, "Hátún 10")])
    >>> store.fail("fetch_residents", DataAccessError("offline"))
    >>> asyncio.run(store.fetch_residents(1))
    Traceback (most recent call last):
    ...
    DataAccessError: offline
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Iterable, Mapping, Optional, Sequence

from mailbox_toolkit.core.errors import DataAccessError
from mailbox_toolkit.core.models import Building, Resident
from mailbox_toolkit.core.utils.serialization import serialize_new_resident, serialize_update
from mailbox_toolkit.ordering import sort_by_name
from mailbox_toolkit.store.base import RecordStore

logger = logging.getLogger(__name__)


class InMemoryRecordStore(RecordStore):
    """
    Dict-backed RecordStore.

    Attributes:
        calls: (operation, argument) pairs in call order
    """

    def __init__(
        self,
        buildings: Iterable[Building] = (),
        residents: Iterable[Resident] = (),
    ):
        self._buildings: dict[int, Building] = {b.id: b for b in buildings}
        self._residents: dict[int, Resident] = {}
        self._next_id = 1
        self._failures: dict[str, BaseException] = {}
        self._update_failures: dict[int, BaseException] = {}
        self.calls: list[tuple[str, Any]] = []

        for resident in residents:
            self._insert(resident)

    # ─────────────────────────────────────────────────────────────────────────
    # Failure injection
    # ─────────────────────────────────────────────────────────────────────────

    def fail(self, operation: str, error: BaseException) -> None:
        """Make every call to ``operation`` raise ``error`` until cleared."""
        self._failures[operation] = error

    def fail_update_for(self, resident_id: int, error: BaseException) -> None:
        """Make updates of one resident raise ``error`` until cleared."""
        self._update_failures[resident_id] = error

    def clear_failures(self) -> None:
        self._failures.clear()
        self._update_failures.clear()

    def _check(self, operation: str, argument: Any = None) -> None:
        self.calls.append((operation, argument))
        error = self._failures.get(operation)
        if error is not None:
            raise error

    # ─────────────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────────────

    def _insert(self, resident: Resident) -> Resident:
        resident_id = resident.id if resident.id is not None else self._next_id
        if resident_id in self._residents:
            raise DataAccessError(f"Duplicate resident id {resident_id}", status_code=409)
        stored = replace(resident, id=resident_id)
        self._residents[resident_id] = stored
        self._next_id = max(self._next_id, resident_id + 1)
        return stored

    def _get(self, resident_id: int) -> Resident:
        resident = self._residents.get(resident_id)
        if resident is None:
            raise DataAccessError(f"Resident {resident_id} not found", status_code=404)
        return resident

    def _check_new(self, resident: Resident) -> None:
        try:
            row = serialize_new_resident(resident)
        except ValueError as e:
            raise DataAccessError(str(e), status_code=400) from e
        if row["building_id"] not in self._buildings:
            raise DataAccessError(
                f"Building {row['building_id']} does not exist", status_code=409
            )

    def add_building(self, building: Building) -> None:
        self._buildings[building.id] = building

    def snapshot(self, building_id: Optional[int] = None) -> list[Resident]:
        """Stored residents in id order, without recording a call."""
        return [
            r for _, r in sorted(self._residents.items())
            if building_id is None or r.building_id == building_id
        ]

    # ─────────────────────────────────────────────────────────────────────────
    # RecordStore
    # ─────────────────────────────────────────────────────────────────────────

    async def fetch_buildings(self) -> list[Building]:
        self._check("fetch_buildings")
        return [self._buildings[k] for k in sorted(self._buildings)]

    async def fetch_residents(self, building_id: int) -> list[Resident]:
        self._check("fetch_residents", building_id)
        return sort_by_name(self.snapshot(building_id))

    async def create_resident(self, resident: Resident) -> Resident:
        self._check("create_resident", resident)
        self._check_new(resident)
        created = self._insert(replace(resident, id=None))
        logger.debug(f"Created {created!r}")
        return created

    async def create_many_residents(self, residents: Sequence[Resident]) -> list[Resident]:
        self._check("create_many_residents", list(residents))
        # Validate everything before inserting anything
        for resident in residents:
            self._check_new(resident)
        return [self._insert(replace(r, id=None)) for r in residents]

    async def update_resident(self, resident_id: int, fields: Mapping[str, Any]) -> Resident:
        self._check("update_resident", (resident_id, dict(fields)))
        error = self._update_failures.get(resident_id)
        if error is not None:
            raise error
        serialize_update(fields)
        updated = replace(self._get(resident_id), **dict(fields))
        self._residents[resident_id] = updated
        return updated

    async def delete_resident(self, resident_id: int) -> None:
        self._check("delete_resident", resident_id)
        self._get(resident_id)
        del self._residents[resident_id]
