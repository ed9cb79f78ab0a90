"""
Module: ordering.sorting

Purpose:
    Deterministic orderings for residents and apartment numbers. All
    functions return new lists and never mutate their input.

Key Functions:
    - sort_by_name(): Locale-aware name order
    - sort_by_priority(): Priority order within an apartment
    - apartment_sort_key(): Numeric-first key for apartment codes
    - sort_apartment_numbers(): Apartment codes in display order

Dependencies:
    - ordering.collation: Locale sort keys

Used By:
    - ordering.grouping: ordered_apartment_entries
    - labels.paginator: Per-cell resident order
    - documents.assembler: Directory rows
    - workflow.reorder: Working copy snapshot
"""

from __future__ import annotations

from typing import Iterable, Sequence

from mailbox_toolkit.core.models import Resident
from mailbox_toolkit.ordering.collation import DEFAULT_LOCALE, collation_key


def sort_by_name(residents: Iterable[Resident], locale: str = DEFAULT_LOCALE) -> list[Resident]:
    """
    Sort residents by name using the locale's alphabet.

    Stable, so residents with the same name keep their input order.
    Missing names sort first.

    Example:
        >>> names = [r.name for r in sort_by_name(residents)]
        ['Anna', 'Guðrún', 'Jón']
    """
    return sorted(residents, key=lambda r: collation_key(r.name or "", locale))


def sort_by_priority(
    residents: Sequence[Resident],
    locale: str = DEFAULT_LOCALE,
) -> list[Resident]:
    """
    Order residents of one apartment for display.

    Rules:
        - Defined priorities come before undefined ones
        - Lower priority first; equal priorities keep input order
        - Residents without a priority are ordered by name among themselves
        - If no resident has a priority, the input order is returned as is

    Args:
        residents: Residents of a single apartment (any order)
        locale: Collation locale for the name tie-break

    Returns:
        New list in display order

    Example:
        >>> # priorities [2, None, 1] on [B, A, C]
        >>> [r.name for r in sort_by_priority(group)]
        ['C', 'B', 'A']
    """
    items = list(residents)
    if not any(r.has_priority for r in items):
        return items

    def key(r: Resident):
        if r.has_priority:
            return (0, r.priority, ())
        return (1, 0, collation_key(r.name or "", locale))

    return sorted(items, key=key)


def apartment_sort_key(number: str, locale: str = DEFAULT_LOCALE) -> tuple:
    """
    Sort key for an apartment code.

    Integer codes sort numerically ("9" before "10") and come before any
    non-numeric code ("2B", "Kjallari"), which sort by collation key.
    Integer codes with the same value ("01", "1") tie-break on the text.
    Only plain ASCII digits count as numeric; "+2", "-1", "1_0" and
    non-Latin digits sort as text.
    """
    text = (number or "").strip()
    if text.isascii() and text.isdigit():
        return (0, int(text), text)
    return (1, collation_key(text, locale), text)


def sort_apartment_numbers(numbers: Iterable[str], locale: str = DEFAULT_LOCALE) -> list[str]:
    """Return apartment codes in display order (duplicates kept)."""
    return sorted(numbers, key=lambda n: apartment_sort_key(n, locale))
