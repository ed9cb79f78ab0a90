"""
Schemas Package

JSON schema definitions and validation utilities for backend rows.
"""

from .validator import (
    SchemaError,
    validate_building_row,
    validate_resident_row,
    validate_rows,
)

__all__ = [
    "SchemaError",
    "validate_building_row",
    "validate_resident_row",
    "validate_rows",
]
