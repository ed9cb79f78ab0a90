"""
Ordering Engine

Pure functions that sort and group residents. Nothing here performs I/O
or mutates its input.
"""

from .collation import DEFAULT_LOCALE, collation_key, supported_locales
from .grouping import ApartmentEntry, group_by_apartment, ordered_apartment_entries
from .sorting import (
    apartment_sort_key,
    sort_apartment_numbers,
    sort_by_name,
    sort_by_priority,
)

__all__ = [
    "DEFAULT_LOCALE",
    "ApartmentEntry",
    "apartment_sort_key",
    "collation_key",
    "group_by_apartment",
    "ordered_apartment_entries",
    "sort_apartment_numbers",
    "sort_by_name",
    "sort_by_priority",
    "supported_locales",
]
