"""
Module: documents.models

Purpose:
    Renderer-ready document descriptions. The assembler builds these from
    residents; the renderer turns them into PDF pages without making any
    ordering or filtering decisions of its own.

Key Classes:
    - DocumentType: Which artifact to produce
    - DirectoryDocument: Alphabetical resident list
    - LabelDocument: Mailbox label sheets

Dependencies:
    - dataclasses (std)
    - labels.models: LabelLayout

Used By:
    - documents.assembler
    - output.renderer
    - controller
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional, Union

from mailbox_toolkit.core.models import Building
from mailbox_toolkit.labels import LabelCell, LabelLayout
from mailbox_toolkit import messages


class DocumentType(str, Enum):
    """Printable artifacts. The value is used on the command line."""

    RESIDENT_DIRECTORY = "directory"
    MAILBOX_LABELS = "labels"

    @property
    def display_title(self) -> str:
        if self is DocumentType.RESIDENT_DIRECTORY:
            return messages.DIRECTORY_TITLE
        return messages.LABELS_TITLE

    @property
    def file_stem(self) -> str:
        """ASCII name used in output filenames."""
        if self is DocumentType.RESIDENT_DIRECTORY:
            return "ibualisti"
        return "postkassamerki"


@dataclass(frozen=True)
class DirectoryRow:
    name: str
    apartment_number: str


@dataclass(frozen=True)
class DirectoryPage:
    index: int
    rows: tuple[DirectoryRow, ...]


@dataclass(frozen=True)
class DirectoryDocument:
    """
    Resident directory ready for rendering (immutable).

    Attributes:
        title: Heading on the first page
        subtitle: Line under the heading
        footer: Date line printed at the bottom of every page
        pages: Rows split into pages
        building: Building the residents belong to, if known
        printed_on: Date the document was assembled
        empty_message: Text printed instead of rows when ``pages`` is empty
    """

    title: str
    subtitle: str
    footer: str
    pages: tuple[DirectoryPage, ...]
    printed_on: date
    building: Optional[Building] = None
    empty_message: str = messages.EMPTY_RESIDENTS

    @property
    def doc_type(self) -> DocumentType:
        return DocumentType.RESIDENT_DIRECTORY

    @property
    def rows(self) -> list[DirectoryRow]:
        return [row for page in self.pages for row in page.rows]

    @property
    def is_empty(self) -> bool:
        return not any(page.rows for page in self.pages)

    @property
    def page_count(self) -> int:
        """Pages in the rendered PDF (an empty document still prints one)."""
        return max(1, len(self.pages))


@dataclass(frozen=True)
class LabelDocument:
    """
    Mailbox labels ready for rendering (immutable).

    Attributes:
        layout: Paginated label cells and the grid configuration
        printed_on: Date the document was assembled
        building: Building the labels are for, if known
        heading_template: Cell heading, formatted with ``number``
        empty_message: Text printed when there are no apartments
    """

    layout: LabelLayout
    printed_on: date
    building: Optional[Building] = None
    heading_template: str = messages.LABEL_HEADING
    empty_message: str = messages.EMPTY_APARTMENTS

    @property
    def doc_type(self) -> DocumentType:
        return DocumentType.MAILBOX_LABELS

    @property
    def title(self) -> str:
        return messages.LABELS_TITLE

    @property
    def is_empty(self) -> bool:
        return self.layout.is_empty

    @property
    def page_count(self) -> int:
        return max(1, self.layout.page_count)

    def heading(self, cell: LabelCell) -> str:
        return self.heading_template.format(number=cell.apartment_number)


Document = Union[DirectoryDocument, LabelDocument]
