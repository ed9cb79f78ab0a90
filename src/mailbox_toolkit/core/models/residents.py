"""
Module: residents

Purpose:
    Provides the Resident and Building dataclasses - the records read from
    the record store and passed through ordering, pagination and document
    assembly. Immutable; any change produces a new instance.

Key Functions:
    - Resident.with_priority(value): Copy with a new priority
    - Resident.has_priority: Whether an explicit priority is set
    - Resident.to_dict() / Resident.from_dict(): Database row mapping
    - Building.to_dict() / Building.from_dict(): Database row mapping

Dependencies:
    - dataclasses (std)

Used By:
    - mailbox_toolkit.ordering: Sorting and grouping
    - mailbox_toolkit.store: Row conversion
    - mailbox_toolkit.workflow: Reordering and intake

Notes:
    Name and apartment number are NOT validated here. Spreadsheet rows may
    carry empty values and the ordering engine must accept them; required
    fields are enforced by the workflow layer before anything is written.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Optional


@dataclass(frozen=True)
class Building:
    """
    A building that residents belong to (immutable).

    Attributes:
        id: Identifier assigned by the record store (sheet index for
            spreadsheet sources)
        title: Display name, also used for output filenames
    """

    id: int
    title: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "title": self.title}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Building:
        return cls(id=int(data["id"]), title=str(data.get("title") or ""))


@dataclass(frozen=True)
class Resident:
    """
    A resident of one apartment (immutable).

    Attributes:
        name: Display name
        apartment_number: Apartment code, kept as text ("101", "2B")
        id: Store identifier; None for records not yet saved
        priority: Ordering hint within the apartment, lower first.
            None means "no explicit priority" and is NOT the same as 0.
        building_id: Owning building; None only for spreadsheet rows
        exclude_from_directory: Omit from the printed directory (labels
            still include the resident)

    Invariants:
        - priority is None or a non-negative int

    Example:
        >>> r = Resident(name="Anna", apartment_number="101", priority=1)
        >>> r.with_priority(0).priority
        0
    """

    name: str
    apartment_number: str
    id: Optional[int] = None
    priority: Optional[int] = None
    building_id: Optional[int] = None
    exclude_from_directory: bool = False

    def __post_init__(self) -> None:
        """Validate resident on construction."""
        if self.priority is not None:
            if isinstance(self.priority, bool) or not isinstance(self.priority, int):
                raise ValueError(f"priority must be an int or None: {self.priority!r}")
            if self.priority < 0:
                raise ValueError(f"priority cannot be negative: {self.priority}")

    @property
    def has_priority(self) -> bool:
        return self.priority is not None

    @property
    def is_saved(self) -> bool:
        return self.id is not None

    def with_priority(self, priority: Optional[int]) -> Resident:
        """Return a copy with ``priority`` replaced."""
        return replace(self, priority=priority)

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self, *, include_id: bool = True) -> dict[str, Any]:
        """
        Serialize to a database row (snake_case column names).

        Args:
            include_id: Whether to include ``id`` (omit when inserting)

        Returns:
            Dict representation
        """
        row: dict[str, Any] = {
            "name": self.name,
            "apartment_number": self.apartment_number,
            "priority": self.priority,
            "building_id": self.building_id,
            "exclude_from_directory": self.exclude_from_directory,
        }
        if include_id and self.id is not None:
            row["id"] = self.id
        return row

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Resident:
        """
        Deserialize from a database row.

        Missing optional columns fall back to their defaults; a null
        ``exclude_from_directory`` is treated as False.
        """
        priority = data.get("priority")
        name = data.get("name")
        apartment = data.get("apartment_number")
        return cls(
            id=int(data["id"]) if data.get("id") is not None else None,
            name=str(name) if name is not None else "",
            apartment_number=str(apartment) if apartment is not None else "",
            priority=int(priority) if priority is not None else None,
            building_id=(
                int(data["building_id"]) if data.get("building_id") is not None else None
            ),
            exclude_from_directory=bool(data.get("exclude_from_directory") or False),
        )

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return (
            f"Resident({self.name!r}, apt={self.apartment_number!r}, "
            f"id={self.id}, priority={self.priority})"
        )
