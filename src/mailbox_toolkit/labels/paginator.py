"""
Module: labels.paginator

Purpose:
    Split ordered apartment entries into fixed-capacity label sheets.

Key Functions:
    - paginate_labels(): Main pagination function

Algorithm:
    Fixed capacity, no measuring:
    1. Page i holds entries [i*per_page, (i+1)*per_page)
    2. Cells fill the grid left to right, then top to bottom
    3. The last page may be partial; it is never padded

Dependencies:
    - labels.models: LabelCell, LabelPage, LabelLayout
    - labels.config: LabelLayoutConfig
    - ordering: sort_by_priority

Used By:
    - documents.assembler: Mailbox label documents
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from mailbox_toolkit.labels.config import LabelLayoutConfig
from mailbox_toolkit.labels.models import LabelCell, LabelLayout, LabelPage
from mailbox_toolkit.ordering import DEFAULT_LOCALE, ApartmentEntry, sort_by_priority

logger = logging.getLogger(__name__)


def paginate_labels(
    entries: Sequence[ApartmentEntry],
    config: Optional[LabelLayoutConfig] = None,
    *,
    locale: str = DEFAULT_LOCALE,
) -> LabelLayout:
    """
    Arrange apartment entries onto label sheets.

    Entry order is preserved exactly; concatenating the pages reproduces
    the input. Residents within each cell are re-sorted by priority, so
    callers may pass unsorted groups.

    Args:
        entries: Apartments in display order
        config: Label sheet configuration (defaults to a 2x3 A4 sheet)
        locale: Collation locale for the priority tie-break

    Returns:
        LabelLayout with ceil(len(entries) / per_page) pages

    Example:
        >>> layout = paginate_labels(entries)  # 6 entries
        >>> layout.page_count
        1
    """
    config = config or LabelLayoutConfig()
    per_page = config.per_page
    warnings: list[str] = []

    if not entries:
        logger.info("No apartments to paginate")
        return LabelLayout(pages=(), config=config, warnings=warnings)

    pages: list[LabelPage] = []
    for page_index, start in enumerate(range(0, len(entries), per_page)):
        cells = []
        for slot, entry in enumerate(entries[start:start + per_page]):
            row, column = divmod(slot, config.columns)
            if not entry.residents:
                warnings.append(f"Apartment {entry.apartment_number!r} has no residents")
            cells.append(
                LabelCell(
                    apartment_number=entry.apartment_number,
                    residents=tuple(sort_by_priority(entry.residents, locale)),
                    row=row,
                    column=column,
                )
            )
        pages.append(LabelPage(index=page_index, cells=tuple(cells)))

    logger.info(f"Paginated {len(entries)} apartments onto {len(pages)} label pages")

    return LabelLayout(pages=tuple(pages), config=config, warnings=warnings)
