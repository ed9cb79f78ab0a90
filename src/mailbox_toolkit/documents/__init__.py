"""
Module: documents

Purpose:
    Document assembly: residents in, renderer-ready documents out.

Key Functions:
    - assemble_document(): Directory or labels by DocumentType
    - assemble_single_label(): One apartment on a small page
    - document_filename(): Deterministic ASCII output filename

Used By:
    - controller
    - gui.widgets.document_panel
"""

from .assembler import (
    DEFAULT_ROWS_PER_PAGE,
    assemble_directory,
    assemble_document,
    assemble_labels,
    assemble_single_label,
    format_print_date,
)
from .filenames import document_filename, slugify, transliterate
from .models import (
    DirectoryDocument,
    DirectoryPage,
    DirectoryRow,
    Document,
    DocumentType,
    LabelDocument,
)

__all__ = [
    # Models
    "DocumentType",
    "Document",
    "DirectoryDocument",
    "DirectoryPage",
    "DirectoryRow",
    "LabelDocument",
    # Assembly
    "DEFAULT_ROWS_PER_PAGE",
    "assemble_document",
    "assemble_directory",
    "assemble_labels",
    "assemble_single_label",
    "format_print_date",
    # Filenames
    "document_filename",
    "slugify",
    "transliterate",
]
