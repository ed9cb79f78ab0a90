"""
Core Models Package

Immutable data models shared by the ordering, labels, documents, store and
workflow packages. All models are frozen dataclasses:
1. No accidental mutation while ordering or paginating
2. Safe to hand from worker threads back to the GUI
3. Changes always produce a new instance (``Resident.with_priority``)
"""

from .residents import Building, Resident

__all__ = [
    "Building",
    "Resident",
]
