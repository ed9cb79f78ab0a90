"""
Module: labels.models

Purpose:
    Data models for label pagination.
    Immutable dataclasses representing label cells, pages and the layout.

Key Classes:
    - LabelCell: One apartment placed in the grid
    - LabelPage: One printed sheet
    - LabelLayout: Paginated output

Dependencies:
    - dataclasses (std)

Used By:
    - labels.paginator: Creates LabelPages
    - documents.assembler: Wraps the layout in a document
    - output.renderer: Draws cells
"""

from __future__ import annotations

from dataclasses import dataclass, field

from mailbox_toolkit.core.models import Resident
from mailbox_toolkit.labels.config import LabelLayoutConfig
from mailbox_toolkit.ordering import ApartmentEntry


@dataclass(frozen=True)
class LabelCell:
    """
    An apartment positioned on a label sheet.

    Attributes:
        apartment_number: Apartment code shown as the heading
        residents: Residents in priority order
        row: Grid row (0 = top)
        column: Grid column (0 = left)
    """

    apartment_number: str
    residents: tuple[Resident, ...]
    row: int
    column: int

    @property
    def names(self) -> list[str]:
        return [r.name for r in self.residents]

    def to_entry(self) -> ApartmentEntry:
        return ApartmentEntry(self.apartment_number, self.residents)


@dataclass(frozen=True)
class LabelPage:
    """
    One sheet of labels.

    Attributes:
        index: Page number (0-indexed)
        cells: Cells in reading order (left to right, top to bottom)

    Example:
        >>> page.cell_count
        6
    """

    index: int
    cells: tuple[LabelCell, ...]

    @property
    def cell_count(self) -> int:
        return len(self.cells)

    @property
    def is_empty(self) -> bool:
        return len(self.cells) == 0


@dataclass(frozen=True)
class LabelLayout:
    """
    Paginated label output.

    Attributes:
        pages: Label sheets in order
        config: Configuration used for pagination
        warnings: Non-fatal issues found while paginating

    Example:
        >>> layout = paginate_labels(entries)  # 13 entries
        >>> [p.cell_count for p in layout.pages]
        [6, 6, 1]
    """

    pages: tuple[LabelPage, ...]
    config: LabelLayoutConfig = field(default_factory=LabelLayoutConfig)
    warnings: list[str] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def total_cells(self) -> int:
        return sum(p.cell_count for p in self.pages)

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to print."""
        return self.total_cells == 0

    def entries(self) -> list[ApartmentEntry]:
        """Flatten back to entries in page order."""
        return [cell.to_entry() for page in self.pages for cell in page.cells]
