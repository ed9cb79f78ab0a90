"""
Mailbox Toolkit Core Package

Shared data models, the error taxonomy and backend row validation. These
modules are the single source of truth for every other package:

1. **Immutable Data Models**
   - Resident and Building are frozen dataclasses
   - Reordering produces new instances via ``Resident.with_priority``

2. **Optional Means Optional**
   - ``priority=None`` is "no explicit priority", never 0
   - ``building_id=None`` only for spreadsheet rows

3. **One Error Taxonomy**
   - ValidationError (local), DataAccessError (remote),
     AuthenticationExpired (session), RenderError (PDF)
"""

from .errors import (
    AuthenticationExpired,
    DataAccessError,
    MailboxToolkitError,
    PartialSaveError,
    RenderError,
    ValidationError,
)
from .models import Building, Resident

__all__ = [
    "AuthenticationExpired",
    "Building",
    "DataAccessError",
    "MailboxToolkitError",
    "PartialSaveError",
    "RenderError",
    "Resident",
    "ValidationError",
]
