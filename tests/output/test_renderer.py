"""
Tests for PDF rendering.

Rendered PDFs are read back with pypdf to check page counts and text.
"""

import io
from datetime import date

import pytest
from pypdf import PdfReader

from mailbox_toolkit.core.errors import RenderError
from mailbox_toolkit.core.models import Resident
from mailbox_toolkit.documents import (
    assemble_directory,
    assemble_labels,
    assemble_single_label,
)
from mailbox_toolkit.labels import LabelLayoutConfig
from mailbox_toolkit.output import render_to_bytes, render_to_pdf

PRINTED_ON = date(2024, 3, 1)


def _read(data: bytes) -> PdfReader:
    return PdfReader(io.BytesIO(data))


def _text(reader: PdfReader) -> str:
    return "\n".join(page.extract_text() for page in reader.pages)


def _many_residents(count):
    return [Resident(f"Anna {i}", str(100 + i)) for i in range(count)]


class TestRenderLabels:
    """Tests for label sheets."""

    def test_one_pdf_page_per_label_page(self):
        doc = assemble_labels(_many_residents(13), printed_on=PRINTED_ON)
        reader = _read(render_to_bytes(doc))
        assert len(reader.pages) == 3

    def test_label_text(self, residents):
        doc = assemble_labels(residents, printed_on=PRINTED_ON)
        text = _text(_read(render_to_bytes(doc)))
        assert "101" in text
        assert "Anna" in text

    def test_empty_labels_print_message_page(self):
        doc = assemble_labels([], printed_on=PRINTED_ON)
        reader = _read(render_to_bytes(doc))
        assert len(reader.pages) == 1

    def test_single_label_page_size(self, residents):
        doc = assemble_single_label("101", residents, printed_on=PRINTED_ON)
        reader = _read(render_to_bytes(doc, show_footer=False))
        assert len(reader.pages) == 1
        width = float(reader.pages[0].mediabox.width)
        assert width == pytest.approx(doc.layout.config.page_width, abs=1)

    def test_long_names_still_render(self):
        name = "Guðmundur " * 12
        config = LabelLayoutConfig(labels_per_page=12)
        doc = assemble_labels([Resident(name.strip(), "1")], label_config=config)
        assert len(_read(render_to_bytes(doc)).pages) == 1


class TestRenderDirectory:
    """Tests for the resident directory."""

    def test_page_count(self):
        doc = assemble_directory(_many_residents(5), printed_on=PRINTED_ON, rows_per_page=2)
        reader = _read(render_to_bytes(doc))
        assert len(reader.pages) == 3

    def test_footer_date_on_page(self, residents):
        doc = assemble_directory(residents, printed_on=PRINTED_ON)
        text = _text(_read(render_to_bytes(doc)))
        assert "01.03.2024" in text

    def test_page_numbers_optional(self, residents):
        doc = assemble_directory(residents, printed_on=PRINTED_ON)
        with_footer = _text(_read(render_to_bytes(doc, show_footer=True)))
        without_footer = _text(_read(render_to_bytes(doc, show_footer=False)))
        assert "Mailbox Toolkit" in with_footer
        assert "Mailbox Toolkit" not in without_footer

    def test_empty_directory_one_page(self):
        doc = assemble_directory([], printed_on=PRINTED_ON)
        assert len(_read(render_to_bytes(doc)).pages) == 1


class TestRenderToPdf:
    """Tests for writing to disk."""

    def test_writes_file_and_creates_parents(self, tmp_path, residents):
        doc = assemble_labels(residents, printed_on=PRINTED_ON)
        target = tmp_path / "out" / "nested" / "labels.pdf"
        result = render_to_pdf(doc, target)
        assert result == target
        assert target.read_bytes().startswith(b"%PDF")

    def test_unwritable_path_raises_render_error(self, tmp_path, residents):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        doc = assemble_labels(residents, printed_on=PRINTED_ON)
        with pytest.raises(RenderError) as exc_info:
            render_to_pdf(doc, blocker / "labels.pdf")
        assert exc_info.value.__cause__ is not None

    def test_unsupported_document(self):
        with pytest.raises(RenderError):
            render_to_bytes(object())
