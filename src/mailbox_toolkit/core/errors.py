"""
Module: core.errors

Purpose:
    Exception taxonomy shared by every layer of the toolkit.

Key Classes:
    - ValidationError: Local input problem, never sent to the record store
    - DataAccessError: Record store / spreadsheet failure
    - PartialSaveError: Batched priority save where only some writes landed
    - AuthenticationExpired: Session missing or rejected by the backend
    - RenderError: PDF rendering failure (retryable)

Used By:
    - mailbox_toolkit.store: Raises DataAccessError / AuthenticationExpired
    - mailbox_toolkit.workflow: Raises ValidationError, PartialSaveError
    - mailbox_toolkit.output.renderer: Raises RenderError
    - mailbox_toolkit.messages: Maps errors to user-facing text
"""

from __future__ import annotations

from typing import Iterable, Optional


class MailboxToolkitError(Exception):
    """Base class for all toolkit errors."""


class ValidationError(MailboxToolkitError):
    """
    Raised when local input fails validation.

    Attributes:
        issues: Individual problems found (one message per issue)
    """

    def __init__(self, message: str, issues: Optional[Iterable[str]] = None):
        super().__init__(message)
        self.issues: list[str] = list(issues) if issues else [message]


class DataAccessError(MailboxToolkitError):
    """
    Raised when a record store operation fails.

    Attributes:
        status_code: HTTP status when the failure came from a response
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class PartialSaveError(DataAccessError):
    """
    Raised when a batch of independent writes only partly succeeded.

    Attributes:
        succeeded: Resident ids whose update was persisted
        failed: Resident ids whose update failed
    """

    def __init__(
        self,
        message: str,
        succeeded: Iterable[int] = (),
        failed: Iterable[int] = (),
    ):
        super().__init__(message)
        self.succeeded: tuple[int, ...] = tuple(succeeded)
        self.failed: tuple[int, ...] = tuple(failed)


class AuthenticationExpired(MailboxToolkitError):
    """Raised when the session is missing, invalid or expired."""


class RenderError(MailboxToolkitError):
    """Raised when a document cannot be rendered to PDF."""
