"""
Module: documents.assembler

Purpose:
    Turn residents into renderer-ready documents. All ordering and
    filtering decisions are made here; the renderer only draws.

Key Functions:
    - assemble_document(): Dispatch on DocumentType
    - assemble_directory(): Alphabetical resident list
    - assemble_labels(): Mailbox label sheets
    - assemble_single_label(): One label on a 7x5 cm page

Rules:
    - The directory omits residents marked ``exclude_from_directory``
    - Labels never omit anyone
    - An empty result is a document with ``is_empty`` set and an
      explanatory message, never a blank page

Dependencies:
    - ordering: sort_by_name, ordered_apartment_entries, sort_by_priority
    - labels: paginate_labels, LabelLayoutConfig

Used By:
    - controller: generate_document
    - gui.widgets.document_panel
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Optional, Union

from mailbox_toolkit import messages
from mailbox_toolkit.core.models import Building, Resident
from mailbox_toolkit.documents.models import (
    DirectoryDocument,
    DirectoryPage,
    DirectoryRow,
    Document,
    DocumentType,
    LabelDocument,
)
from mailbox_toolkit.labels import (
    SINGLE_LABEL_HEIGHT_PT,
    SINGLE_LABEL_WIDTH_PT,
    LabelLayoutConfig,
    paginate_labels,
)
from mailbox_toolkit.ordering import (
    DEFAULT_LOCALE,
    ApartmentEntry,
    ordered_apartment_entries,
    sort_by_name,
    sort_by_priority,
)

logger = logging.getLogger(__name__)

DEFAULT_ROWS_PER_PAGE = 32

SINGLE_LABEL_CONFIG = LabelLayoutConfig(
    columns=1,
    rows=1,
    page_width=SINGLE_LABEL_WIDTH_PT,
    page_height=SINGLE_LABEL_HEIGHT_PT,
    margin_top=10,
    margin_bottom=10,
    margin_left=10,
    margin_right=10,
    gutter=0,
    heading_font_size=14,
    name_font_size=11,
    draw_borders=False,
)


def format_print_date(value: date) -> str:
    """Icelandic short date, e.g. ``01.03.2024``."""
    return value.strftime("%d.%m.%Y")


def assemble_directory(
    residents: Iterable[Resident],
    building: Optional[Building] = None,
    *,
    locale: str = DEFAULT_LOCALE,
    printed_on: Optional[date] = None,
    rows_per_page: int = DEFAULT_ROWS_PER_PAGE,
) -> DirectoryDocument:
    """
    Build the alphabetical resident directory.

    Args:
        residents: Residents of one building (any order)
        building: Building for the document, if known
        locale: Collation locale for the name order
        printed_on: Date for the footer (defaults to today)
        rows_per_page: Rows before a page break

    Raises:
        ValueError: If rows_per_page is not positive
    """
    if rows_per_page <= 0:
        raise ValueError(f"rows_per_page must be positive: {rows_per_page}")
    printed_on = printed_on or date.today()

    listed = [r for r in residents if not r.exclude_from_directory]
    rows = [
        DirectoryRow(name=r.name, apartment_number=r.apartment_number)
        for r in sort_by_name(listed, locale)
    ]
    pages = tuple(
        DirectoryPage(index=i, rows=tuple(rows[start:start + rows_per_page]))
        for i, start in enumerate(range(0, len(rows), rows_per_page))
    )

    if not rows:
        logger.warning("Directory has no residents to list")
    else:
        logger.info(f"Assembled directory: {len(rows)} residents on {len(pages)} pages")

    return DirectoryDocument(
        title=messages.DIRECTORY_TITLE,
        subtitle=messages.DIRECTORY_SUBTITLE,
        footer=messages.DIRECTORY_FOOTER.format(date=format_print_date(printed_on)),
        pages=pages,
        printed_on=printed_on,
        building=building,
    )


def assemble_labels(
    residents: Iterable[Resident],
    building: Optional[Building] = None,
    *,
    label_config: Optional[LabelLayoutConfig] = None,
    locale: str = DEFAULT_LOCALE,
    printed_on: Optional[date] = None,
) -> LabelDocument:
    """Build mailbox label sheets for every apartment."""
    entries = ordered_apartment_entries(residents, locale)
    layout = paginate_labels(entries, label_config, locale=locale)
    for warning in layout.warnings:
        logger.warning(warning)
    if layout.is_empty:
        logger.warning("No apartments to print labels for")
    return LabelDocument(
        layout=layout,
        printed_on=printed_on or date.today(),
        building=building,
    )


def assemble_single_label(
    apartment_number: str,
    residents: Iterable[Resident],
    *,
    locale: str = DEFAULT_LOCALE,
    printed_on: Optional[date] = None,
) -> LabelDocument:
    """
    Build one label for one apartment on a 7x5 cm page.

    Residents of other apartments are ignored.
    """
    members = [r for r in residents if r.apartment_number == apartment_number]
    entry = ApartmentEntry(apartment_number, tuple(sort_by_priority(members, locale)))
    layout = paginate_labels([entry], SINGLE_LABEL_CONFIG, locale=locale)
    return LabelDocument(layout=layout, printed_on=printed_on or date.today())


def assemble_document(
    doc_type: Union[DocumentType, str],
    residents: Iterable[Resident],
    building: Optional[Building] = None,
    *,
    label_config: Optional[LabelLayoutConfig] = None,
    locale: str = DEFAULT_LOCALE,
    printed_on: Optional[date] = None,
    rows_per_page: int = DEFAULT_ROWS_PER_PAGE,
) -> Document:
    """
    Assemble a document of the requested type.

    Args:
        doc_type: DocumentType or its value ("directory", "labels")
        residents: Residents of one building
        building: Building for the document, if known
        label_config: Label grid (labels only)
        locale: Collation locale
        printed_on: Assembly date (defaults to today)
        rows_per_page: Directory rows per page (directory only)

    Returns:
        DirectoryDocument or LabelDocument

    Raises:
        ValueError: If doc_type is not a known document type
    """
    doc_type = DocumentType(doc_type)
    if doc_type is DocumentType.RESIDENT_DIRECTORY:
        return assemble_directory(
            residents,
            building,
            locale=locale,
            printed_on=printed_on,
            rows_per_page=rows_per_page,
        )
    return assemble_labels(
        residents,
        building,
        label_config=label_config,
        locale=locale,
        printed_on=printed_on,
    )
