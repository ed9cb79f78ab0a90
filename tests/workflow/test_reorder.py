"""
Tests for PriorityReorderSession.

Covers the view/edit/save cycle, partial failures and session expiry.
"""

import asyncio

import pytest

from mailbox_toolkit.core.errors import (
    AuthenticationExpired,
    DataAccessError,
    PartialSaveError,
    ValidationError,
)
from mailbox_toolkit.core.models import Building, Resident
from mailbox_toolkit.store import InMemoryRecordStore
from mailbox_toolkit.workflow import (
    PriorityReorderSession,
    ReorderState,
    ReorderStateError,
)


def _names(residents):
    return [r.name for r in residents]


@pytest.fixture
def apartment(make_residents):
    return make_residents("A", "B", "C")


@pytest.fixture
def apartment_store(apartment):
    return InMemoryRecordStore([Building(1, "Hátún 10")], apartment)


@pytest.fixture
def session(apartment_store, apartment, auth):
    return PriorityReorderSession(apartment_store, apartment, auth=auth)


class TestEditing:
    """Tests for the working copy."""

    def test_starts_viewing(self, session):
        assert session.state is ReorderState.VIEWING
        assert _names(session.current) == ["A", "B", "C"]
        assert _names(session.working) == ["A", "B", "C"]

    def test_move_changes_only_working_copy(self, session):
        session.begin_editing()
        session.move_resident(2, 0)
        assert _names(session.working) == ["C", "A", "B"]
        assert _names(session.current) == ["A", "B", "C"]
        assert session.dirty

    def test_proposed_priorities(self, session):
        session.begin_editing()
        session.move_resident(2, 0)
        assert session.proposed_priorities() == {3: 0, 1: 1, 2: 2}

    def test_move_to_same_index_is_not_a_change(self, session):
        session.begin_editing()
        session.move_resident(1, 1)
        assert not session.dirty

    def test_move_requires_editing(self, session):
        with pytest.raises(ReorderStateError):
            session.move_resident(0, 1)

    @pytest.mark.parametrize("from_index, to_index", [(3, 0), (0, -1), (-1, 0)])
    def test_move_out_of_range(self, session, from_index, to_index):
        session.begin_editing()
        with pytest.raises(IndexError):
            session.move_resident(from_index, to_index)

    def test_cancel_discards_without_writing(self, session, apartment_store):
        session.begin_editing()
        session.move_resident(2, 0)
        session.cancel()
        assert session.state is ReorderState.VIEWING
        assert _names(session.working) == ["A", "B", "C"]
        assert not any(op == "update_resident" for op, _ in apartment_store.calls)

    def test_begin_editing_twice_keeps_working_copy(self, session):
        session.begin_editing()
        session.move_resident(2, 0)
        session.begin_editing()
        assert _names(session.working) == ["C", "A", "B"]

    def test_reload_while_editing_rejected(self, session, apartment):
        session.begin_editing()
        with pytest.raises(ReorderStateError):
            session.reload(apartment)

    def test_starts_from_existing_priorities(self, apartment_store, make_residents):
        residents = make_residents(("A", 2), ("B", 0), ("C", 1))
        session = PriorityReorderSession(apartment_store, residents)
        assert _names(session.current) == ["B", "C", "A"]


class TestSave:
    """Tests for persisting the new order."""

    def test_save_writes_positions(self, session, apartment_store):
        session.begin_editing()
        session.move_resident(2, 0)
        outcome = asyncio.run(session.save())

        assert outcome.ok
        assert sorted(outcome.succeeded) == [1, 2, 3]
        priorities = {r.name: r.priority for r in apartment_store.snapshot()}
        assert priorities == {"C": 0, "A": 1, "B": 2}
        assert session.state is ReorderState.VIEWING
        assert _names(session.current) == ["C", "A", "B"]

    def test_refetch_shows_saved_order(self, session, apartment_store):
        session.begin_editing()
        session.move_resident(2, 0)
        asyncio.run(session.save())

        fetched = asyncio.run(apartment_store.fetch_residents(1))
        session.reload(fetched)
        assert _names(session.current) == ["C", "A", "B"]

    def test_every_resident_gets_a_priority(self, session, apartment_store):
        session.begin_editing()
        asyncio.run(session.save())
        assert [r.priority for r in apartment_store.snapshot()] == [0, 1, 2]

    def test_on_saved_called(self, apartment_store, apartment, auth):
        seen = []
        session = PriorityReorderSession(apartment_store, apartment, auth=auth, on_saved=seen.append)
        session.begin_editing()
        session.move_resident(0, 2)
        asyncio.run(session.save())
        assert len(seen) == 1
        assert {r.name for r in seen[0]} == {"A", "B", "C"}

    def test_save_in_steps(self, session, apartment_store):
        session.begin_editing()
        session.move_resident(2, 0)

        ordered = session.begin_save()
        assert session.state is ReorderState.SAVING
        assert apartment_store.calls == []

        results = asyncio.run(session.write_priorities(ordered))
        assert session.state is ReorderState.SAVING
        assert _names(session.current) == ["A", "B", "C"]

        outcome = session.finish_save(ordered, results)
        assert outcome.ok
        assert session.state is ReorderState.VIEWING
        assert _names(session.current) == ["C", "A", "B"]

    def test_abort_save_returns_to_editing(self, session):
        session.begin_editing()
        session.begin_save()
        session.abort_save()
        assert session.state is ReorderState.EDITING

    def test_save_requires_editing(self, session):
        with pytest.raises(ReorderStateError):
            asyncio.run(session.save())

    def test_unsaved_resident_blocks_save(self, apartment_store, auth):
        residents = [Resident("A", "101", id=1), Resident("Nýr", "101")]
        session = PriorityReorderSession(apartment_store, residents, auth=auth)
        session.begin_editing()
        with pytest.raises(ValidationError) as exc_info:
            asyncio.run(session.save())
        assert "Nýr" in exc_info.value.issues[0]
        assert apartment_store.calls == []


class TestSaveFailures:
    """Tests for failed and partially failed saves."""

    def test_partial_failure(self, session, apartment_store):
        apartment_store.fail_update_for(2, DataAccessError("boom"))
        session.begin_editing()
        session.move_resident(2, 0)

        with pytest.raises(PartialSaveError) as exc_info:
            asyncio.run(session.save())

        error = exc_info.value
        assert sorted(error.succeeded) == [1, 3]
        assert error.failed == (2,)
        assert session.state is ReorderState.EDITING
        assert session.last_error is error
        assert session.last_outcome.is_partial
        assert _names(session.working) == ["C", "A", "B"]

    def test_cancel_after_partial_failure_shows_stored_order(self, session, apartment_store):
        apartment_store.fail_update_for(2, DataAccessError("boom"))
        session.begin_editing()
        session.move_resident(2, 0)
        with pytest.raises(PartialSaveError):
            asyncio.run(session.save())

        session.cancel()
        stored = {r.name: r.priority for r in apartment_store.snapshot()}
        shown = {r.name: r.priority for r in session.current}
        assert stored == {"A": 1, "B": None, "C": 0}
        assert shown == stored
        assert _names(session.current) == ["C", "A", "B"]

    def test_total_failure_keeps_persisted(self, session, apartment_store):
        apartment_store.fail("update_resident", DataAccessError("offline"))
        session.begin_editing()
        session.move_resident(2, 0)
        with pytest.raises(DataAccessError):
            asyncio.run(session.save())
        session.cancel()
        assert _names(session.current) == ["A", "B", "C"]

    def test_retry_after_partial_failure(self, session, apartment_store):
        apartment_store.fail_update_for(2, DataAccessError("boom"))
        session.begin_editing()
        session.move_resident(2, 0)
        with pytest.raises(PartialSaveError):
            asyncio.run(session.save())

        apartment_store.clear_failures()
        outcome = asyncio.run(session.save())
        assert outcome.ok
        assert _names(session.current) == ["C", "A", "B"]

    def test_total_failure(self, session, apartment_store):
        apartment_store.fail("update_resident", DataAccessError("offline"))
        session.begin_editing()
        with pytest.raises(DataAccessError) as exc_info:
            asyncio.run(session.save())
        assert not isinstance(exc_info.value, PartialSaveError)
        assert session.last_outcome.succeeded == ()

    def test_signed_out_before_save(self, session, auth, apartment_store):
        session.begin_editing()
        auth.expire_session()
        with pytest.raises(AuthenticationExpired):
            asyncio.run(session.save())
        assert session.state is ReorderState.EDITING
        assert apartment_store.calls == []

    def test_token_rejected_during_save(self, session, auth, apartment_store):
        apartment_store.fail("update_resident", AuthenticationExpired("JWT expired"))
        session.begin_editing()
        with pytest.raises(AuthenticationExpired):
            asyncio.run(session.save())
        assert not auth.is_authenticated
        assert session.state is ReorderState.EDITING
