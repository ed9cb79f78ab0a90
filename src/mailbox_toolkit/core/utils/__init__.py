"""
Core Utilities Package

Row conversion helpers shared by the record store backends.
"""

from .serialization import (
    buildings_from_sheet_titles,
    deserialize_building,
    deserialize_resident,
    residents_from_sheet_values,
    serialize_new_resident,
    serialize_update,
)

__all__ = [
    "buildings_from_sheet_titles",
    "deserialize_building",
    "deserialize_resident",
    "residents_from_sheet_values",
    "serialize_new_resident",
    "serialize_update",
]
