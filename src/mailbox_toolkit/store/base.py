"""
Module: store.base

Purpose:
    Abstract record store interface. Every backend (hosted database,
    spreadsheet, in-memory) implements the same async operations and the
    same failure contract.

Key Classes:
    - RecordStore: Abstract async CRUD for buildings and residents

Failure contract:
    - AuthenticationExpired: Session missing or rejected
    - DataAccessError: Anything else the backend could not do
    Nothing is retried automatically.

Used By:
    - workflow: Resident management, intake, reordering
    - controller: Document generation
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence

from mailbox_toolkit.core.models import Building, Resident


class RecordStore(ABC):
    """Async access to buildings and residents."""

    #: False for sources that only support fetching
    writable: bool = True

    @abstractmethod
    async def fetch_buildings(self) -> list[Building]:
        """All buildings, ordered by id."""

    @abstractmethod
    async def fetch_residents(self, building_id: int) -> list[Resident]:
        """Residents of one building, ordered by name."""

    @abstractmethod
    async def create_resident(self, resident: Resident) -> Resident:
        """Insert one resident and return it with its assigned id."""

    @abstractmethod
    async def create_many_residents(self, residents: Sequence[Resident]) -> list[Resident]:
        """
        Insert several residents in one request.

        All-or-nothing: on failure nothing is inserted.
        """

    @abstractmethod
    async def update_resident(self, resident_id: int, fields: Mapping[str, Any]) -> Resident:
        """
        Apply a partial update and return the updated resident.

        Args:
            resident_id: Resident to update
            fields: Attribute name -> new value (see UPDATABLE_FIELDS)
        """

    @abstractmethod
    async def delete_resident(self, resident_id: int) -> None:
        """Delete one resident."""
