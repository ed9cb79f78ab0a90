"""
Store Module

Record store interface and its backends:
- SupabaseRecordStore: hosted database (read/write)
- SheetsResidentSource: spreadsheet (read-only)
- InMemoryRecordStore: offline demo and tests
"""

from .base import RecordStore
from .memory import InMemoryRecordStore
from .sheets import SheetsResidentSource
from .supabase import SupabaseRecordStore

__all__ = [
    "RecordStore",
    "InMemoryRecordStore",
    "SheetsResidentSource",
    "SupabaseRecordStore",
]
