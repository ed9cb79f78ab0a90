"""
Workflow Module

Stateful administrator workflows on top of the record store:
- ResidentManager: add / edit / remove residents
- PriorityReorderSession: reorder one apartment
- submit_batch: create several apartments at once
"""

from .intake import PendingApartment, build_residents, submit_batch, validate_batch
from .reorder import (
    PriorityReorderSession,
    ReorderState,
    ReorderStateError,
    SaveOutcome,
)
from .residents import ResidentManager, resident_issues

__all__ = [
    "PendingApartment",
    "PriorityReorderSession",
    "ReorderState",
    "ReorderStateError",
    "ResidentManager",
    "SaveOutcome",
    "build_residents",
    "resident_issues",
    "submit_batch",
    "validate_batch",
]
