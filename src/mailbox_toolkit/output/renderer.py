"""
Module: output.renderer

Purpose:
    Render assembled documents to PDF using ReportLab.
    Directory documents become a two-column table; label documents become
    a bordered grid of apartment labels, one LabelPage per PDF page.

Key Functions:
    - render_to_pdf(): Render a document to a file
    - render_to_bytes(): Render a document in memory

Dependencies:
    - reportlab: PDF generation
    - documents.models: DirectoryDocument, LabelDocument

Used By:
    - controller: generate_document
    - gui.widgets.document_panel: Label preview export
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import BinaryIO, Sequence, Union

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from mailbox_toolkit import messages
from mailbox_toolkit.core.errors import RenderError
from mailbox_toolkit.documents.models import (
    DirectoryDocument,
    DirectoryPage,
    Document,
    LabelDocument,
)
from mailbox_toolkit.labels import LabelCell, LabelLayoutConfig, LabelPage

logger = logging.getLogger(__name__)

# Constants
A4_WIDTH_PT, A4_HEIGHT_PT = A4
MIN_FONT_SIZE = 6

# Directory layout (points)
DIRECTORY_MARGIN_X = 56
DIRECTORY_MARGIN_TOP = 56
DIRECTORY_TITLE_SIZE = 20
DIRECTORY_SUBTITLE_SIZE = 11
DIRECTORY_ROW_SIZE = 11
DIRECTORY_ROW_HEIGHT = 18
DIRECTORY_APARTMENT_COLUMN = 0.75  # fraction of the usable width

# Footer configuration
FOOTER_FONT_SIZE = 7
PAGE_NUMBER_TEXT = "Síða {page} af {total}"


def _get_footer_text() -> str:
    """Get footer text with current version number."""
    from mailbox_toolkit import __version__
    return f"Mailbox Toolkit v{__version__}"


def render_to_pdf(
    document: Document,
    output_path: Path,
    *,
    show_footer: bool = True,
) -> Path:
    """
    Render a document to a PDF file.

    Args:
        document: DirectoryDocument or LabelDocument
        output_path: Path to write PDF (parent directories are created)
        show_footer: Draw page numbers and the toolkit version

    Returns:
        The path written

    Raises:
        RenderError: If the PDF cannot be produced or written; the
            original exception is chained and the call may be retried

    Example:
        >>> render_to_pdf(document, Path("out/postkassamerki.pdf"))
        PosixPath('out/postkassamerki.pdf')
    """
    output_path = Path(output_path)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        _render(document, str(output_path), show_footer)
    except RenderError:
        raise
    except Exception as e:
        logger.error(f"Failed to render {output_path.name}: {e}", exc_info=True)
        raise RenderError(f"Could not render {output_path}: {e}") from e

    logger.info(f"Rendered {document.page_count} pages to {output_path}")
    return output_path


def render_to_bytes(document: Document, *, show_footer: bool = True) -> bytes:
    """
    Render a document to PDF bytes.

    Raises:
        RenderError: If the PDF cannot be produced
    """
    buf = io.BytesIO()
    try:
        _render(document, buf, show_footer)
    except Exception as e:
        logger.error(f"Failed to render document in memory: {e}", exc_info=True)
        raise RenderError(f"Could not render document: {e}") from e
    return buf.getvalue()


def _render(document: Document, target: Union[str, BinaryIO], show_footer: bool) -> None:
    if isinstance(document, DirectoryDocument):
        _render_directory(document, target, show_footer)
    elif isinstance(document, LabelDocument):
        _render_labels(document, target, show_footer)
    else:
        raise RenderError(f"Unsupported document: {type(document).__name__}")


# ─────────────────────────────────────────────────────────────────────────────
# Directory
# ─────────────────────────────────────────────────────────────────────────────

def _render_directory(
    document: DirectoryDocument,
    target: Union[str, BinaryIO],
    show_footer: bool,
) -> None:
    c = canvas.Canvas(target, pagesize=A4)
    c.setTitle(document.title)

    total = document.page_count
    if document.is_empty:
        y = _draw_directory_heading(c, document)
        _draw_centered_message(c, document.empty_message, A4_WIDTH_PT, y - 40)
        _draw_directory_footer(c, document.footer, 1, total, show_footer)
        c.showPage()
    else:
        for page in document.pages:
            y = A4_HEIGHT_PT - DIRECTORY_MARGIN_TOP
            if page.index == 0:
                y = _draw_directory_heading(c, document)
            _draw_directory_rows(c, page, y)
            _draw_directory_footer(c, document.footer, page.index + 1, total, show_footer)
            c.showPage()

    c.save()


def _draw_directory_heading(c: canvas.Canvas, document: DirectoryDocument) -> float:
    """Draw title and subtitle; return the y below them."""
    y = A4_HEIGHT_PT - DIRECTORY_MARGIN_TOP
    c.setFont("Helvetica-Bold", DIRECTORY_TITLE_SIZE)
    c.drawString(DIRECTORY_MARGIN_X, y - DIRECTORY_TITLE_SIZE, document.title)
    y -= DIRECTORY_TITLE_SIZE + 8

    if document.building is not None and document.building.title:
        c.setFont("Helvetica", DIRECTORY_SUBTITLE_SIZE + 2)
        c.drawString(DIRECTORY_MARGIN_X, y - DIRECTORY_SUBTITLE_SIZE, document.building.title)
        y -= DIRECTORY_SUBTITLE_SIZE + 6

    c.saveState()
    c.setFont("Helvetica-Oblique", DIRECTORY_SUBTITLE_SIZE)
    c.setFillColorRGB(0.35, 0.35, 0.35)
    c.drawString(DIRECTORY_MARGIN_X, y - DIRECTORY_SUBTITLE_SIZE, document.subtitle)
    c.restoreState()
    return y - DIRECTORY_SUBTITLE_SIZE - 20


def _draw_directory_rows(c: canvas.Canvas, page: DirectoryPage, top: float) -> None:
    usable = A4_WIDTH_PT - 2 * DIRECTORY_MARGIN_X
    apartment_x = DIRECTORY_MARGIN_X + usable * DIRECTORY_APARTMENT_COLUMN
    name_width = apartment_x - DIRECTORY_MARGIN_X - 8

    y = top
    c.setFont("Helvetica-Bold", DIRECTORY_ROW_SIZE)
    c.drawString(DIRECTORY_MARGIN_X, y, messages.DIRECTORY_NAME_HEADER)
    c.drawString(apartment_x, y, messages.DIRECTORY_APARTMENT_HEADER)
    c.setLineWidth(0.75)
    c.line(DIRECTORY_MARGIN_X, y - 5, A4_WIDTH_PT - DIRECTORY_MARGIN_X, y - 5)
    y -= DIRECTORY_ROW_HEIGHT + 2

    for i, row in enumerate(page.rows):
        if i % 2 == 1:
            c.saveState()
            c.setFillColorRGB(0.95, 0.95, 0.95)
            c.rect(
                DIRECTORY_MARGIN_X - 4,
                y - 5,
                usable + 8,
                DIRECTORY_ROW_HEIGHT,
                stroke=0,
                fill=1,
            )
            c.restoreState()
        name_size = _fit_font_size(c, [row.name], "Helvetica", DIRECTORY_ROW_SIZE, name_width)
        c.setFont("Helvetica", name_size)
        c.drawString(DIRECTORY_MARGIN_X, y, row.name)
        c.setFont("Helvetica", DIRECTORY_ROW_SIZE)
        c.drawString(apartment_x, y, row.apartment_number)
        y -= DIRECTORY_ROW_HEIGHT


def _draw_directory_footer(
    c: canvas.Canvas,
    text: str,
    page: int,
    total: int,
    show_footer: bool,
) -> None:
    c.saveState()
    c.setFont("Helvetica", 9)
    c.setFillColorRGB(0.3, 0.3, 0.3)
    c.drawString(DIRECTORY_MARGIN_X, 36, text)
    c.restoreState()
    if show_footer:
        _draw_footer(c, A4_WIDTH_PT, page, total)


# ─────────────────────────────────────────────────────────────────────────────
# Labels
# ─────────────────────────────────────────────────────────────────────────────

def _render_labels(
    document: LabelDocument,
    target: Union[str, BinaryIO],
    show_footer: bool,
) -> None:
    config = document.layout.config
    c = canvas.Canvas(target, pagesize=(config.page_width, config.page_height))
    c.setTitle(document.title)

    # The small single-label page has no room for a footer
    show_footer = show_footer and config.per_page > 1
    total = document.page_count

    if document.is_empty:
        _draw_centered_message(
            c, document.empty_message, config.page_width, config.page_height / 2
        )
        if show_footer:
            _draw_footer(c, config.page_width, 1, total)
        c.showPage()
    else:
        for page in document.layout.pages:
            _render_label_page(c, document, page, config)
            if show_footer:
                _draw_footer(c, config.page_width, page.index + 1, total)
            c.showPage()

    c.save()


def _render_label_page(
    c: canvas.Canvas,
    document: LabelDocument,
    page: LabelPage,
    config: LabelLayoutConfig,
) -> None:
    for cell in page.cells:
        _draw_label_cell(c, document.heading(cell), cell, config)


def _draw_label_cell(
    c: canvas.Canvas,
    heading: str,
    cell: LabelCell,
    config: LabelLayoutConfig,
) -> None:
    """
    Draw one label: centered apartment heading with the names below.

    Font sizes shrink (down to MIN_FONT_SIZE) until the heading and every
    name fit inside the cell.
    """
    x, y = config.cell_origin(cell.row, cell.column)
    width, height = config.cell_width, config.cell_height
    padding = min(12.0, width * 0.06)
    inner_width = width - 2 * padding

    if config.draw_borders:
        c.saveState()
        c.setLineWidth(0.5)
        c.setStrokeColorRGB(0.6, 0.6, 0.6)
        c.rect(x, y, width, height, stroke=1, fill=0)
        c.restoreState()

    heading_size = _fit_font_size(
        c, [heading], config.heading_font_name, config.heading_font_size, inner_width
    )
    names = cell.names
    name_size = _fit_font_size(
        c,
        names,
        config.font_name,
        config.name_font_size,
        inner_width,
        max_height=height - 2 * padding - heading_size * 1.8,
    )

    block_height = heading_size * 1.6 + len(names) * name_size * 1.3
    cursor = y + height / 2 + block_height / 2 - heading_size

    c.setFont(config.heading_font_name, heading_size)
    c.drawCentredString(x + width / 2, cursor, heading)
    cursor -= heading_size * 0.6 + name_size * 1.3

    c.setFont(config.font_name, name_size)
    for name in names:
        c.drawCentredString(x + width / 2, cursor, name)
        cursor -= name_size * 1.3


# ─────────────────────────────────────────────────────────────────────────────
# Shared helpers
# ─────────────────────────────────────────────────────────────────────────────

def _fit_font_size(
    c: canvas.Canvas,
    lines: Sequence[str],
    font_name: str,
    size: float,
    max_width: float,
    max_height: float | None = None,
) -> float:
    """Largest size <= ``size`` at which every line fits the box."""
    while size > MIN_FONT_SIZE:
        widest = max((c.stringWidth(line, font_name, size) for line in lines), default=0)
        tall = max_height is not None and len(lines) * size * 1.3 > max_height
        if widest <= max_width and not tall:
            break
        size -= 0.5
    return max(size, MIN_FONT_SIZE)


def _draw_centered_message(c: canvas.Canvas, text: str, page_width: float, y: float) -> None:
    c.saveState()
    c.setFont("Helvetica", 12)
    c.setFillColorRGB(0.3, 0.3, 0.3)
    c.drawCentredString(page_width / 2, y, text)
    c.restoreState()


def _draw_footer(c: canvas.Canvas, page_width_pt: float, page: int, total: int) -> None:
    """
    Draw page number (right) and toolkit version (centered).

    Positioned in the bottom margin, 15pt from the page bottom.
    """
    c.saveState()
    c.setFont("Helvetica", FOOTER_FONT_SIZE)
    c.setFillColorRGB(0.4, 0.4, 0.4)

    footer_text = _get_footer_text()
    text_width = c.stringWidth(footer_text, "Helvetica", FOOTER_FONT_SIZE)
    c.drawString((page_width_pt - text_width) / 2, 15, footer_text)
    c.drawRightString(
        page_width_pt - 36, 15, PAGE_NUMBER_TEXT.format(page=page, total=total)
    )
    c.restoreState()
