"""
Output Module

PDF rendering for assembled documents.
"""

from .renderer import render_to_bytes, render_to_pdf

__all__ = [
    "render_to_pdf",
    "render_to_bytes",
]
