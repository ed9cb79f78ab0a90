"""
Unit Tests for Resident Sorting

Tests for sort_by_name(), sort_by_priority() and apartment ordering.
"""

import pytest

from mailbox_toolkit.core.models import Resident
from mailbox_toolkit.ordering import (
    apartment_sort_key,
    sort_apartment_numbers,
    sort_by_name,
    sort_by_priority,
)


def _names(residents):
    return [r.name for r in residents]


class TestSortByName:
    """Tests for alphabetical ordering."""

    def test_icelandic_order(self, residents):
        assert _names(sort_by_name(residents)) == [
            "Anna Guðmundsdóttir",
            "Árni Árnason",
            "Guðrún Sigurðardóttir",
            "Jón Jónsson",
            "Þóra Þórðardóttir",
        ]

    def test_does_not_mutate_input(self, residents):
        before = list(residents)
        sort_by_name(residents)
        assert residents == before

    def test_equal_names_keep_input_order(self):
        first = Resident("Anna", "101")
        second = Resident("Anna", "102")
        assert sort_by_name([first, second]) == [first, second]
        assert sort_by_name([second, first]) == [second, first]

    def test_idempotent(self, residents):
        once = sort_by_name(residents)
        assert sort_by_name(once) == once


class TestSortByPriority:
    """Tests for the per-apartment display order."""

    def test_defined_priorities_first(self, make_residents):
        group = make_residents(("B", 2), "A", ("C", 1))
        assert _names(sort_by_priority(group)) == ["C", "B", "A"]

    def test_no_priorities_keeps_input_order(self, make_residents):
        group = make_residents("Jón", "Anna", "Björn")
        assert _names(sort_by_priority(group)) == ["Jón", "Anna", "Björn"]

    def test_undefined_priorities_sorted_by_name(self, make_residents):
        group = make_residents("Þór", ("Jón", 0), "Anna", "Ásta")
        assert _names(sort_by_priority(group)) == ["Jón", "Anna", "Ásta", "Þór"]

    def test_equal_priorities_keep_input_order(self, make_residents):
        group = make_residents(("Jón", 1), ("Anna", 1), ("Björn", 0))
        assert _names(sort_by_priority(group)) == ["Björn", "Jón", "Anna"]

    def test_zero_is_a_defined_priority(self, make_residents):
        group = make_residents("Anna", ("Zophonías", 0))
        assert _names(sort_by_priority(group)) == ["Zophonías", "Anna"]

    def test_empty(self):
        assert sort_by_priority([]) == []

    def test_returns_new_list(self, make_residents):
        group = make_residents("A", "B")
        result = sort_by_priority(group)
        assert result == group
        assert result is not group

    def test_idempotent(self, make_residents):
        group = make_residents(("B", 2), "A", ("C", 1), "D")
        once = sort_by_priority(group)
        assert sort_by_priority(once) == once


class TestApartmentOrder:
    """Tests for apartment code ordering."""

    def test_numeric_codes_sort_numerically(self):
        assert sort_apartment_numbers(["10", "9", "101"]) == ["9", "10", "101"]

    def test_non_numeric_after_numeric(self):
        assert sort_apartment_numbers(["2B", "10", "9"]) == ["9", "10", "2B"]

    def test_non_numeric_use_collation(self):
        assert sort_apartment_numbers(["Risíbúð", "Kjallari", "2B"]) == ["2B", "Kjallari", "Risíbúð"]

    def test_leading_zero_ties_on_text(self):
        assert sort_apartment_numbers(["1", "01"]) == ["01", "1"]

    def test_duplicates_kept(self):
        assert sort_apartment_numbers(["2", "1", "2"]) == ["1", "2", "2"]

    @pytest.mark.parametrize("code", ["0", "12", " 7 "])
    def test_integer_key(self, code):
        assert apartment_sort_key(code)[0] == 0

    def test_blank_code_is_non_numeric(self):
        assert apartment_sort_key("")[0] == 1

    @pytest.mark.parametrize("code", ["1_0", "+2", "-1", "٣", "1.5"])
    def test_only_ascii_digits_are_numeric(self, code):
        assert apartment_sort_key(code)[0] == 1

    def test_signed_and_underscored_codes_after_numeric(self):
        ordered = sort_apartment_numbers(["1_0", "9", "11", "٣", "-1", "+2"])
        assert ordered[:2] == ["9", "11"]
        assert sorted(ordered[2:]) == sorted(["1_0", "٣", "-1", "+2"])


class TestMissingValues:
    """Empty names and apartment codes are ordinary sort keys."""

    def test_empty_name_sorts_first(self):
        residents = [Resident("Björn", "1"), Resident("", "1"), Resident("Anna", "1")]
        assert _names(sort_by_name(residents)) == ["", "Anna", "Björn"]

    def test_missing_name_does_not_raise(self):
        residents = [Resident("Anna", "1"), Resident(None, "1")]
        assert _names(sort_by_name(residents)) == [None, "Anna"]

    def test_empty_name_with_priorities(self):
        residents = [
            Resident("Anna", "1"),
            Resident("", "1"),
            Resident("Jón", "1", priority=1),
            Resident("Gunna", "1", priority=0),
        ]
        assert _names(sort_by_priority(residents)) == ["Gunna", "Jón", "", "Anna"]

    def test_empty_apartment_code(self):
        assert sort_apartment_numbers(["", "2", "1"]) == ["1", "2", ""]
        assert apartment_sort_key(None)[0] == 1
