"""
Schema Validation Utilities

Validates rows returned by the hosted backend against JSON schemas before
they are turned into Resident / Building models.

A row that does not match its schema means the backend returned something
the toolkit cannot trust, so it is reported as a data access failure
(``SchemaError`` is a ``DataAccessError``) rather than a local input problem.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable

import jsonschema

from mailbox_toolkit.core.errors import DataAccessError


# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class SchemaError(DataAccessError):
    """Raised when a backend row fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def _validate(data: Any, schema_name: str) -> None:
    schema = _load_schema(schema_name)
    try:
        jsonschema.validate(data, schema)
    except jsonschema.ValidationError as e:
        raise SchemaError(
            f"{schema_name} row failed schema validation: {e.message}",
            path=".".join(str(p) for p in e.absolute_path),
            errors=[e.message],
        ) from e


def validate_resident_row(data: dict[str, Any]) -> None:
    """
    Validate one resident row.

    Raises:
        SchemaError: If the row is malformed
    """
    _validate(data, "resident")


def validate_building_row(data: dict[str, Any]) -> None:
    """
    Validate one building row.

    Raises:
        SchemaError: If the row is malformed
    """
    _validate(data, "building")


def validate_rows(rows: Iterable[dict[str, Any]], schema_name: str) -> None:
    """Validate every row, reporting the index of the first bad one."""
    for i, row in enumerate(rows):
        try:
            _validate(row, schema_name)
        except SchemaError as e:
            raise SchemaError(
                f"Row {i}: {e}",
                path=f"[{i}].{e.path}" if e.path else f"[{i}]",
                errors=e.errors,
            ) from e
