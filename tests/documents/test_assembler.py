"""
Unit Tests for Document Assembly

Tests for the directory and label assemblers.
"""

from datetime import date

import pytest

from mailbox_toolkit import messages
from mailbox_toolkit.core.models import Resident
from mailbox_toolkit.documents import (
    DirectoryDocument,
    DocumentType,
    LabelDocument,
    assemble_directory,
    assemble_document,
    assemble_labels,
    assemble_single_label,
    format_print_date,
)
from mailbox_toolkit.labels import LabelLayoutConfig

PRINTED_ON = date(2024, 3, 1)


class TestAssembleDirectory:
    """Tests for the alphabetical resident directory."""

    def test_rows_sorted_by_name(self, residents, building):
        doc = assemble_directory(residents, building, printed_on=PRINTED_ON)
        assert [row.name for row in doc.rows] == [
            "Anna Guðmundsdóttir",
            "Árni Árnason",
            "Guðrún Sigurðardóttir",
            "Jón Jónsson",
            "Þóra Þórðardóttir",
        ]
        assert doc.rows[0].apartment_number == "101"

    def test_title_and_footer(self, residents):
        doc = assemble_directory(residents, printed_on=PRINTED_ON)
        assert doc.title == messages.DIRECTORY_TITLE
        assert doc.subtitle == messages.DIRECTORY_SUBTITLE
        assert doc.footer == "Útprentað: 01.03.2024"
        assert doc.printed_on == PRINTED_ON

    def test_excluded_residents_left_out(self, residents):
        hidden = Resident("Leynd Persóna", "102", exclude_from_directory=True)
        doc = assemble_directory([*residents, hidden], printed_on=PRINTED_ON)
        assert "Leynd Persóna" not in [row.name for row in doc.rows]
        assert len(doc.rows) == len(residents)

    def test_empty_directory(self):
        doc = assemble_directory([], printed_on=PRINTED_ON)
        assert doc.is_empty
        assert doc.pages == ()
        assert doc.page_count == 1
        assert doc.empty_message == messages.EMPTY_RESIDENTS

    def test_rows_split_into_pages(self, residents):
        doc = assemble_directory(residents, printed_on=PRINTED_ON, rows_per_page=2)
        assert [len(p.rows) for p in doc.pages] == [2, 2, 1]
        assert [p.index for p in doc.pages] == [0, 1, 2]

    def test_rows_per_page_must_be_positive(self, residents):
        with pytest.raises(ValueError):
            assemble_directory(residents, rows_per_page=0)

    def test_defaults_to_today(self, residents):
        doc = assemble_directory(residents)
        assert doc.printed_on == date.today()


class TestAssembleLabels:
    """Tests for mailbox label documents."""

    def test_one_cell_per_apartment(self, residents, building):
        doc = assemble_labels(residents, building, printed_on=PRINTED_ON)
        cells = doc.layout.pages[0].cells
        assert [c.apartment_number for c in cells] == ["101", "102", "201"]
        assert doc.building == building

    def test_excluded_residents_still_get_labels(self):
        hidden = Resident("Leynd Persóna", "102", exclude_from_directory=True)
        doc = assemble_labels([hidden], printed_on=PRINTED_ON)
        assert doc.layout.pages[0].cells[0].names == ["Leynd Persóna"]

    def test_heading(self, residents):
        doc = assemble_labels(residents, printed_on=PRINTED_ON)
        assert doc.heading(doc.layout.pages[0].cells[0]) == "Íbúð 101"

    def test_custom_grid(self, residents):
        config = LabelLayoutConfig(labels_per_page=2)
        doc = assemble_labels(residents, label_config=config, printed_on=PRINTED_ON)
        assert doc.layout.page_count == 2

    def test_empty_labels(self):
        doc = assemble_labels([], printed_on=PRINTED_ON)
        assert doc.is_empty
        assert doc.page_count == 1
        assert doc.empty_message == messages.EMPTY_APARTMENTS


class TestAssembleSingleLabel:
    """Tests for a single apartment label."""

    def test_only_selected_apartment(self, residents):
        doc = assemble_single_label("201", residents, printed_on=PRINTED_ON)
        assert doc.layout.page_count == 1
        cell = doc.layout.pages[0].cells[0]
        assert cell.apartment_number == "201"
        assert sorted(cell.names) == ["Árni Árnason", "Þóra Þórðardóttir"]

    def test_one_label_per_page(self, residents):
        doc = assemble_single_label("101", residents)
        assert doc.layout.config.per_page == 1

    def test_unknown_apartment_warns(self, residents):
        doc = assemble_single_label("999", residents)
        assert doc.layout.warnings == ["Apartment '999' has no residents"]


class TestAssembleDocument:
    """Tests for dispatch by document type."""

    def test_directory_by_value(self, residents):
        doc = assemble_document("directory", residents, printed_on=PRINTED_ON)
        assert isinstance(doc, DirectoryDocument)
        assert doc.doc_type is DocumentType.RESIDENT_DIRECTORY

    def test_labels_by_enum(self, residents):
        doc = assemble_document(DocumentType.MAILBOX_LABELS, residents, printed_on=PRINTED_ON)
        assert isinstance(doc, LabelDocument)
        assert doc.title == messages.LABELS_TITLE

    def test_unknown_type(self, residents):
        with pytest.raises(ValueError):
            assemble_document("envelopes", residents)


def test_format_print_date():
    assert format_print_date(date(2024, 12, 5)) == "05.12.2024"
