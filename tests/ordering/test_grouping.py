"""
Unit Tests for Apartment Grouping

Tests for group_by_apartment() and ordered_apartment_entries().
"""

from mailbox_toolkit.core.models import Resident
from mailbox_toolkit.ordering import (
    ApartmentEntry,
    group_by_apartment,
    ordered_apartment_entries,
)


class TestGroupByApartment:
    """Tests for partitioning by apartment number."""

    def test_partition_covers_every_resident_once(self, residents):
        groups = group_by_apartment(residents)
        flattened = [r for group in groups.values() for r in group]
        assert sorted(flattened, key=id) == sorted(residents, key=id)
        assert len(flattened) == len(residents)

    def test_groups_share_apartment_number(self, residents):
        for number, group in group_by_apartment(residents).items():
            assert all(r.apartment_number == number for r in group)

    def test_first_appearance_order(self, residents):
        assert list(group_by_apartment(residents)) == ["101", "102", "201"]

    def test_residents_keep_input_order(self, residents):
        group = group_by_apartment(residents)["101"]
        assert [r.name for r in group] == ["Jón Jónsson", "Anna Guðmundsdóttir"]

    def test_exact_string_keys(self):
        residents = [Resident("A", "101"), Resident("B", "101 ")]
        assert list(group_by_apartment(residents)) == ["101", "101 "]

    def test_empty(self):
        assert group_by_apartment([]) == {}


class TestOrderedApartmentEntries:
    """Tests for display-ordered entries."""

    def test_apartments_in_display_order(self):
        residents = [
            Resident("A", "2B"),
            Resident("B", "10"),
            Resident("C", "9"),
        ]
        entries = ordered_apartment_entries(residents)
        assert [e.apartment_number for e in entries] == ["9", "10", "2B"]

    def test_residents_in_priority_order(self, make_residents):
        group = make_residents(("B", 2), "A", ("C", 1))
        entries = ordered_apartment_entries(group)
        assert len(entries) == 1
        assert entries[0].names == ["C", "B", "A"]

    def test_entry_length(self, residents):
        entries = ordered_apartment_entries(residents)
        assert [len(e) for e in entries] == [2, 1, 2]

    def test_empty_entry(self):
        entry = ApartmentEntry("101", ())
        assert len(entry) == 0
        assert entry.names == []


class TestMissingApartmentNumbers:
    """Residents with an empty apartment code form their own group."""

    @staticmethod
    def _mixed():
        return [
            Resident("", ""),
            Resident("", "1"),
            Resident("Anna", "1", priority=0),
            Resident("Jón", ""),
            Resident("Gunna", "2", priority=1),
        ]

    def test_empty_code_is_a_group(self):
        groups = group_by_apartment(self._mixed())
        assert list(groups) == ["", "1", "2"]
        assert [r.name for r in groups[""]] == ["", "Jón"]
        assert sum(len(g) for g in groups.values()) == 5

    def test_empty_group_after_numeric_apartments(self):
        entries = ordered_apartment_entries(self._mixed())
        assert [e.apartment_number for e in entries] == ["1", "2", ""]

    def test_entry_order_with_empty_names(self):
        entries = {e.apartment_number: e for e in ordered_apartment_entries(self._mixed())}
        assert entries["1"].names == ["Anna", ""]
        assert entries[""].names == ["", "Jón"]
        assert entries["2"].names == ["Gunna"]
