"""
Serialization Utilities

Converts between Resident models and the two external row formats:

- Database rows (snake_case columns, see ``Resident.to_dict``)
- Spreadsheet rows (header ``name``, ``apartmentNumber``, ``priority``)

Update payloads are built from keyword fields with the Python attribute
names and mapped onto column names here, so the store never needs to know
about model attribute names.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..models.residents import Building, Resident
from ..schemas.validator import validate_building_row, validate_resident_row

logger = logging.getLogger(__name__)


# Model attribute -> database column for partial updates
UPDATABLE_FIELDS: dict[str, str] = {
    "name": "name",
    "apartment_number": "apartment_number",
    "priority": "priority",
    "exclude_from_directory": "exclude_from_directory",
}

SHEET_NAME_COLUMN = "name"
SHEET_APARTMENT_COLUMN = "apartmentNumber"
SHEET_PRIORITY_COLUMN = "priority"


# ─────────────────────────────────────────────────────────────────────────────
# Database rows
# ─────────────────────────────────────────────────────────────────────────────

def deserialize_resident(data: dict[str, Any], *, validate: bool = True) -> Resident:
    """
    Deserialize a Resident from a database row.

    Args:
        data: Row dictionary from the backend
        validate: Whether to validate against the schema first

    Raises:
        SchemaError: If validate=True and the row is malformed
    """
    if validate:
        validate_resident_row(data)
    return Resident.from_dict(data)


def deserialize_building(data: dict[str, Any], *, validate: bool = True) -> Building:
    """Deserialize a Building from a database row."""
    if validate:
        validate_building_row(data)
    return Building.from_dict(data)


def serialize_new_resident(resident: Resident) -> dict[str, Any]:
    """
    Serialize a resident for insertion.

    Note:
        ``id`` is never sent; the store assigns it.

    Raises:
        ValueError: If the resident has no building_id
    """
    if resident.building_id is None:
        raise ValueError(f"building_id is required to create {resident!r}")
    return resident.to_dict(include_id=False)


def serialize_update(fields: Mapping[str, Any]) -> dict[str, Any]:
    """
    Map partial update fields onto database columns.

    Args:
        fields: Attribute name -> new value

    Returns:
        Column name -> new value

    Raises:
        ValueError: If a field cannot be updated (``id``, ``building_id``
            or an unknown name)
    """
    payload: dict[str, Any] = {}
    for key, value in fields.items():
        column = UPDATABLE_FIELDS.get(key)
        if column is None:
            raise ValueError(f"Field cannot be updated: {key!r}")
        payload[column] = value
    return payload


# ─────────────────────────────────────────────────────────────────────────────
# Spreadsheet rows
# ─────────────────────────────────────────────────────────────────────────────

def _parse_priority(raw: Any) -> Optional[int]:
    if raw is None:
        return None
    text = str(raw).strip()
    if not text:
        return None
    try:
        value = int(text)
    except ValueError:
        logger.warning(f"Ignoring non-numeric priority {text!r}")
        return None
    if value < 0:
        logger.warning(f"Ignoring negative priority {value}")
        return None
    return value


def residents_from_sheet_values(values: Sequence[Sequence[Any]]) -> list[Resident]:
    """
    Convert a spreadsheet value grid into residents.

    The first row is the header; columns are located by name so their order
    does not matter. Missing cells become empty strings, a blank or invalid
    priority becomes None. Fully empty rows are skipped.

    Args:
        values: Rows of cell values, header first

    Returns:
        Residents in sheet order (no ids, no building)
    """
    if not values:
        return []

    header = [str(cell).strip() for cell in values[0]]
    index = {column: i for i, column in enumerate(header)}

    def cell(row: Sequence[Any], column: str) -> Any:
        i = index.get(column)
        if i is None or i >= len(row):
            return None
        return row[i]

    residents: list[Resident] = []
    for row in values[1:]:
        if not any(str(c).strip() for c in row):
            continue
        name = cell(row, SHEET_NAME_COLUMN)
        apartment = cell(row, SHEET_APARTMENT_COLUMN)
        residents.append(
            Resident(
                name=str(name).strip() if name is not None else "",
                apartment_number=str(apartment).strip() if apartment is not None else "",
                priority=_parse_priority(cell(row, SHEET_PRIORITY_COLUMN)),
            )
        )
    return residents


def buildings_from_sheet_titles(titles: Iterable[str]) -> list[Building]:
    """Each sheet is one building; its index is the building id."""
    return [Building(id=i, title=title) for i, title in enumerate(titles)]
