"""
Module: labels

Purpose:
    Mailbox label pagination.
    Converts ordered apartment entries into fixed-grid label sheets.

Key Functions:
    - paginate_labels(): Arrange entries onto pages

Key Classes:
    - LabelLayoutConfig: Grid and page configuration
    - LabelCell / LabelPage / LabelLayout: Paginated output

Used By:
    - documents.assembler
"""

from .config import (
    SINGLE_LABEL_HEIGHT_PT,
    SINGLE_LABEL_WIDTH_PT,
    LabelLayoutConfig,
)
from .models import LabelCell, LabelLayout, LabelPage
from .paginator import paginate_labels

__all__ = [
    # Config
    "LabelLayoutConfig",
    "SINGLE_LABEL_WIDTH_PT",
    "SINGLE_LABEL_HEIGHT_PT",
    # Models
    "LabelCell",
    "LabelPage",
    "LabelLayout",
    # Functions
    "paginate_labels",
]
