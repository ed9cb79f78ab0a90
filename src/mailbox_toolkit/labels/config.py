"""
Module: labels.config

Purpose:
    Configuration for mailbox label sheets.
    Defines the label grid, page dimensions, margins and font sizes.

Key Classes:
    - LabelLayoutConfig: Immutable label sheet configuration

Dependencies:
    - dataclasses (std)
    - reportlab: Page size constants

Used By:
    - labels.paginator: Page arrangement
    - output.renderer: Cell geometry
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import cm

A4_WIDTH_PT, A4_HEIGHT_PT = A4

DEFAULT_COLUMNS = 2
DEFAULT_ROWS = 3

# Stand-alone label for a single mailbox
SINGLE_LABEL_WIDTH_PT = 7 * cm
SINGLE_LABEL_HEIGHT_PT = 5 * cm


@dataclass(frozen=True)
class LabelLayoutConfig:
    """
    Configuration for a label sheet (immutable).

    Attributes:
        columns: Labels per row
        rows: Label rows per page
        labels_per_page: Override for labels per page; defaults to
            columns * rows. A larger value adds rows to the grid.
        page_width: Page width in points
        page_height: Page height in points
        margin_*: Page margins in points
        gutter: Space between neighbouring labels in points
        heading_font_size: Apartment heading size
        name_font_size: Resident name size
        draw_borders: Draw a cut line around each label

    Example:
        >>> LabelLayoutConfig().per_page
        6
        >>> LabelLayoutConfig(labels_per_page=8).grid_rows
        4
    """

    columns: int = DEFAULT_COLUMNS
    rows: int = DEFAULT_ROWS
    labels_per_page: Optional[int] = None

    # Page
    page_width: float = A4_WIDTH_PT
    page_height: float = A4_HEIGHT_PT

    # Margins
    margin_top: float = 36
    margin_bottom: float = 36
    margin_left: float = 36
    margin_right: float = 36
    gutter: float = 12

    # Text
    font_name: str = "Helvetica"
    heading_font_name: str = "Helvetica-Bold"
    heading_font_size: float = 16
    name_font_size: float = 12

    draw_borders: bool = True

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.columns <= 0:
            raise ValueError(f"columns must be positive: {self.columns}")
        if self.rows <= 0:
            raise ValueError(f"rows must be positive: {self.rows}")
        if self.labels_per_page is not None and self.labels_per_page <= 0:
            raise ValueError(f"labels_per_page must be positive: {self.labels_per_page}")
        if self.page_width <= 0 or self.page_height <= 0:
            raise ValueError("Page dimensions must be positive")
        if self.gutter < 0:
            raise ValueError(f"gutter cannot be negative: {self.gutter}")
        if self.cell_width <= 0:
            raise ValueError("Margins and gutters exceed page width")
        if self.cell_height <= 0:
            raise ValueError("Margins and gutters exceed page height")

    @property
    def per_page(self) -> int:
        """Labels placed on each page."""
        if self.labels_per_page is not None:
            return self.labels_per_page
        return self.columns * self.rows

    @property
    def grid_rows(self) -> int:
        """Rows actually used, grown to fit ``labels_per_page``."""
        return max(self.rows, math.ceil(self.per_page / self.columns))

    @property
    def available_width(self) -> float:
        """Width available for labels (excluding margins)."""
        return self.page_width - self.margin_left - self.margin_right

    @property
    def available_height(self) -> float:
        """Height available for labels (excluding margins)."""
        return self.page_height - self.margin_top - self.margin_bottom

    @property
    def cell_width(self) -> float:
        return (self.available_width - self.gutter * (self.columns - 1)) / self.columns

    @property
    def cell_height(self) -> float:
        rows = self.grid_rows
        return (self.available_height - self.gutter * (rows - 1)) / rows

    def cell_origin(self, row: int, column: int) -> tuple[float, float]:
        """
        Bottom-left corner of a cell in PDF coordinates.

        Row 0 is the top row.
        """
        x = self.margin_left + column * (self.cell_width + self.gutter)
        top = self.page_height - self.margin_top - row * (self.cell_height + self.gutter)
        return x, top - self.cell_height
