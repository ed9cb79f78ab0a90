"""
Module: workflow.reorder

Purpose:
    Priority reordering for the residents of one apartment. The
    administrator drags residents into a new order; saving writes each
    resident's position as its priority (0, 1, 2, ...).

Key Classes:
    - ReorderState: VIEWING, EDITING, SAVING
    - SaveOutcome: Which writes landed and which failed
    - PriorityReorderSession: The state machine

State machine:
    VIEWING --begin_editing--> EDITING --save--> SAVING --ok--> VIEWING
                                  ^                 |
                                  +-----failed------+
    EDITING --cancel--> VIEWING (no writes)

Writes are independent per resident: one failing write does not undo the
others, and the writes that landed are kept in the persisted snapshot.
Concurrent edits by another administrator are overwritten (last write
wins).

Dependencies:
    - ordering: sort_by_priority
    - store.base: RecordStore
    - auth.provider: Session gate

Used By:
    - gui.widgets.reorder_panel
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, Optional

from mailbox_toolkit.auth.provider import AuthProvider, require_authenticated
from mailbox_toolkit.core.errors import (
    AuthenticationExpired,
    DataAccessError,
    PartialSaveError,
    ValidationError,
)
from mailbox_toolkit.core.models import Resident
from mailbox_toolkit.messages import UNSAVED_RESIDENT
from mailbox_toolkit.ordering import DEFAULT_LOCALE, sort_by_priority
from mailbox_toolkit.store.base import RecordStore

logger = logging.getLogger(__name__)


class ReorderState(Enum):
    VIEWING = "viewing"
    EDITING = "editing"
    SAVING = "saving"


class ReorderStateError(RuntimeError):
    """Raised when an operation is not allowed in the current state."""


@dataclass(frozen=True)
class SaveOutcome:
    """
    Result of one save attempt.

    Attributes:
        succeeded: Resident ids whose priority was written
        failed: Resident ids whose write failed
        errors: Resident id -> failure
    """

    succeeded: tuple[int, ...] = ()
    failed: tuple[int, ...] = ()
    errors: dict[int, BaseException] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed

    @property
    def is_partial(self) -> bool:
        return bool(self.succeeded) and bool(self.failed)


class PriorityReorderSession:
    """
    Reorder the residents of one apartment.

    Args:
        store: Where priorities are written
        residents: Persisted residents of the apartment
        auth: Session gate; when given, saving requires a signed-in user
            and an expired session is dropped
        locale: Collation locale for the initial order
        on_saved: Called with the saved residents after a full success,
            typically to refetch the building

    Example:
        >>> session = PriorityReorderSession(store, [a, b, c])
        >>> session.begin_editing()
        >>> session.move_resident(2, 0)
        >>> session.proposed_priorities()
        {3: 0, 1: 1, 2: 2}
        >>> asyncio.run(session.save())
    """

    def __init__(
        self,
        store: RecordStore,
        residents: Iterable[Resident] = (),
        *,
        auth: Optional[AuthProvider] = None,
        locale: str = DEFAULT_LOCALE,
        on_saved: Optional[Callable[[list[Resident]], None]] = None,
    ):
        self._store = store
        self._auth = auth
        self._locale = locale
        self.on_saved = on_saved

        self._persisted: list[Resident] = list(residents)
        self._working: Optional[list[Resident]] = None
        self.state = ReorderState.VIEWING
        self.dirty = False
        self.last_error: Optional[BaseException] = None
        self.last_outcome: Optional[SaveOutcome] = None

    # ─────────────────────────────────────────────────────────────────────────
    # Views
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def current(self) -> list[Resident]:
        """Persisted residents in display order."""
        return sort_by_priority(self._persisted, self._locale)

    @property
    def working(self) -> list[Resident]:
        """Working copy while editing, else the persisted order."""
        if self._working is None:
            return self.current
        return list(self._working)

    @property
    def is_editing(self) -> bool:
        return self.state is ReorderState.EDITING

    def proposed_priorities(self) -> dict[int, int]:
        """Resident id -> new priority for every saved resident."""
        return {r.id: i for i, r in enumerate(self.working) if r.id is not None}

    # ─────────────────────────────────────────────────────────────────────────
    # Transitions
    # ─────────────────────────────────────────────────────────────────────────

    def begin_editing(self) -> None:
        """Snapshot the current order as the working copy."""
        if self.state is ReorderState.EDITING:
            return
        self._require(ReorderState.VIEWING, "begin editing")
        self._working = self.current
        self.dirty = False
        self.last_error = None
        self.state = ReorderState.EDITING

    def move_resident(self, from_index: int, to_index: int) -> None:
        """
        Move one resident within the working copy.

        Raises:
            ReorderStateError: If not editing
            IndexError: If either index is out of range
        """
        self._require(ReorderState.EDITING, "move residents")
        assert self._working is not None
        size = len(self._working)
        for index in (from_index, to_index):
            if not 0 <= index < size:
                raise IndexError(f"Index {index} out of range for {size} residents")
        if from_index == to_index:
            return
        resident = self._working.pop(from_index)
        self._working.insert(to_index, resident)
        self.dirty = True

    def cancel(self) -> None:
        """Discard the working copy without writing anything."""
        if self.state is ReorderState.SAVING:
            raise ReorderStateError("Cannot cancel while saving")
        self._working = None
        self.dirty = False
        self.last_error = None
        self.state = ReorderState.VIEWING

    def reload(self, residents: Iterable[Resident]) -> None:
        """
        Replace the persisted snapshot (e.g. after a refetch).

        Raises:
            ReorderStateError: If editing or saving; the working copy would
                no longer match the persisted residents
        """
        self._require(ReorderState.VIEWING, "reload")
        self._persisted = list(residents)

    async def save(self) -> SaveOutcome:
        """
        Write each resident's position as its priority.

        Same as ``begin_save`` + ``write_priorities`` + ``finish_save``.
        Callers that run the writes on another thread use the three steps
        directly so the session is only touched on the calling thread.

        Returns:
            SaveOutcome with every id in ``succeeded``

        Raises:
            ReorderStateError: If not editing
            ValidationError: If a resident has never been saved (no write
                is attempted)
            AuthenticationExpired: If the session is missing or rejected;
                the session is dropped and the state returns to EDITING
            PartialSaveError: If only some writes succeeded
            DataAccessError: If every write failed
        """
        ordered = self.begin_save()
        results = await self.write_priorities(ordered)
        return self.finish_save(ordered, results)

    def begin_save(self) -> list[Resident]:
        """
        Check the working copy and enter SAVING.

        Returns:
            Residents in their new order; position i is written as priority i
        """
        self._require(ReorderState.EDITING, "save")
        assert self._working is not None
        ordered = list(self._working)

        unsaved = [r for r in ordered if r.id is None]
        if unsaved:
            issues = [UNSAVED_RESIDENT.format(name=r.name) for r in unsaved]
            raise ValidationError("Residents without an id cannot be reordered", issues)

        if self._auth is not None:
            try:
                require_authenticated(self._auth)
            except AuthenticationExpired:
                self._auth.expire_session()
                raise

        self.state = ReorderState.SAVING
        logger.info(f"Saving priorities for {len(ordered)} residents")
        return ordered

    async def write_priorities(self, ordered: list[Resident]) -> list[object]:
        """
        Send one priority update per resident, concurrently.

        Only the store is touched. Each entry of the result is the updated
        Resident or the exception its write raised.
        """
        return await asyncio.gather(
            *(
                self._store.update_resident(r.id, {"priority": i})
                for i, r in enumerate(ordered)
            ),
            return_exceptions=True,
        )

    def finish_save(self, ordered: list[Resident], results: list[object]) -> SaveOutcome:
        """
        Apply the write results to the session.

        Residents whose write landed replace their persisted copy, also
        when other writes failed, so ``current`` matches the store.
        """
        self._require(ReorderState.SAVING, "finish saving")

        saved: list[Resident] = []
        succeeded: list[int] = []
        failed: list[int] = []
        errors: dict[int, BaseException] = {}
        for resident, result in zip(ordered, results):
            if isinstance(result, BaseException):
                failed.append(resident.id)
                errors[resident.id] = result
            else:
                succeeded.append(resident.id)
                saved.append(result)

        outcome = SaveOutcome(tuple(succeeded), tuple(failed), errors)
        self.last_outcome = outcome
        self._merge_persisted(saved)

        if outcome.ok:
            self._working = None
            self.dirty = False
            self.last_error = None
            self.state = ReorderState.VIEWING
            logger.info(f"Saved priorities for {len(saved)} residents")
            if self.on_saved is not None:
                self.on_saved(self.current)
            return outcome

        self.state = ReorderState.EDITING
        self.last_error = self._failure(outcome)
        raise self.last_error

    def abort_save(self) -> None:
        """Return to EDITING when the writes could not be run at all."""
        if self.state is ReorderState.SAVING:
            self.state = ReorderState.EDITING

    # ─────────────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────────────

    def _require(self, state: ReorderState, action: str) -> None:
        if self.state is not state:
            raise ReorderStateError(
                f"Cannot {action} in state {self.state.value}"
            )

    def _merge_persisted(self, saved: list[Resident]) -> None:
        updated = {r.id: r for r in saved}
        self._persisted = [updated.pop(r.id, r) for r in self._persisted]
        self._persisted.extend(updated.values())

    def _failure(self, outcome: SaveOutcome) -> BaseException:
        errors = list(outcome.errors.values())

        expired = next((e for e in errors if isinstance(e, AuthenticationExpired)), None)
        if expired is not None:
            logger.warning("Session expired while saving priorities")
            if self._auth is not None:
                self._auth.expire_session()
            return expired

        unexpected = next((e for e in errors if not isinstance(e, DataAccessError)), None)
        if unexpected is not None:
            logger.error(f"Unexpected failure while saving priorities: {unexpected!r}")
            return unexpected

        if outcome.is_partial:
            logger.warning(
                f"Saved {len(outcome.succeeded)} of "
                f"{len(outcome.succeeded) + len(outcome.failed)} priorities"
            )
            error: DataAccessError = PartialSaveError(
                f"Saved {len(outcome.succeeded)} priorities, "
                f"{len(outcome.failed)} failed",
                succeeded=outcome.succeeded,
                failed=outcome.failed,
            )
        else:
            logger.error("No priorities could be saved")
            error = DataAccessError("No priorities could be saved")
        error.__cause__ = errors[0]
        return error
