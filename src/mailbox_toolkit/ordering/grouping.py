"""
Apartment grouping.

Partitions residents by their exact ``apartment_number`` string and
produces the ordered (apartment, residents) entries that the label
paginator and the reorder workflow work from.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from mailbox_toolkit.core.models import Resident
from mailbox_toolkit.ordering.collation import DEFAULT_LOCALE
from mailbox_toolkit.ordering.sorting import sort_apartment_numbers, sort_by_priority


@dataclass(frozen=True)
class ApartmentEntry:
    """
    One apartment and its residents in display order.

    Attributes:
        apartment_number: Exact apartment code shared by every resident
        residents: Residents ordered with ``sort_by_priority``
    """

    apartment_number: str
    residents: tuple[Resident, ...]

    def __len__(self) -> int:
        return len(self.residents)

    @property
    def names(self) -> list[str]:
        return [r.name for r in self.residents]


def group_by_apartment(residents: Iterable[Resident]) -> dict[str, list[Resident]]:
    """
    Partition residents by apartment number.

    Keys appear in order of first appearance and residents keep their input
    order within a group. Every resident lands in exactly one group; the
    key is the exact string, so "101" and "101 " are different apartments.
    """
    groups: dict[str, list[Resident]] = {}
    for resident in residents:
        groups.setdefault(resident.apartment_number, []).append(resident)
    return groups


def ordered_apartment_entries(
    residents: Iterable[Resident],
    locale: str = DEFAULT_LOCALE,
) -> list[ApartmentEntry]:
    """
    Group residents and order both apartments and residents for display.

    Apartments follow ``sort_apartment_numbers``; residents within each
    apartment follow ``sort_by_priority``.
    """
    groups = group_by_apartment(residents)
    return [
        ApartmentEntry(
            apartment_number=number,
            residents=tuple(sort_by_priority(groups[number], locale)),
        )
        for number in sort_apartment_numbers(groups, locale)
    ]
