"""
Tests for ResidentManager and resident field validation.
"""

import asyncio

import pytest

from mailbox_toolkit import messages
from mailbox_toolkit.core.errors import AuthenticationExpired, ValidationError
from mailbox_toolkit.core.models import Resident
from mailbox_toolkit.workflow import ResidentManager, resident_issues


@pytest.fixture
def manager(store, auth):
    manager = ResidentManager(store, auth, building_id=1)
    asyncio.run(manager.load())
    return manager


class TestResidentIssues:
    """Tests for resident_issues()."""

    def test_valid(self):
        assert resident_issues("Anna", "101", None) == []

    @pytest.mark.parametrize("name, apartment", [("", "101"), ("Anna", " "), (None, None)])
    def test_required_fields(self, name, apartment):
        assert resident_issues(name, apartment, None) == [messages.REQUIRED_FIELDS]

    @pytest.mark.parametrize("priority", [-1, "2", 1.0, True])
    def test_invalid_priority(self, priority):
        assert resident_issues("Anna", "101", priority) == [messages.INVALID_PRIORITY]

    def test_duplicate_name_in_apartment(self):
        existing = [Resident("Anna", "101", id=1)]
        issues = resident_issues(" anna ", "101", None, existing)
        assert issues == [messages.DUPLICATE_NAME.format(name="anna", apartment="101")]

    def test_same_name_other_apartment(self):
        existing = [Resident("Anna", "102", id=1)]
        assert resident_issues("Anna", "101", None, existing) == []

    def test_edit_is_not_duplicate_of_itself(self):
        existing = [Resident("Anna", "101", id=1)]
        assert resident_issues("Anna", "101", 0, existing, ignore_id=1) == []


class TestResidentManager:
    """Tests for CRUD through the manager."""

    def test_load(self, manager):
        assert len(manager.residents) == 5
        assert manager.find(1).name == "Jón Jónsson"
        assert manager.find(99) is None

    def test_add(self, manager, store):
        created = asyncio.run(manager.add(" Ný Persóna ", "301", priority=0))
        assert created.name == "Ný Persóna"
        assert created.building_id == 1
        assert manager.find(created.id) is not None

    def test_add_duplicate_rejected(self, manager, store):
        with pytest.raises(ValidationError):
            asyncio.run(manager.add("Jón Jónsson", "101"))
        assert not any(op == "create_resident" for op, _ in store.calls)

    def test_add_invalid_priority(self, manager):
        with pytest.raises(ValidationError) as exc_info:
            asyncio.run(manager.add("Ný", "301", priority=-3))
        assert exc_info.value.issues == [messages.INVALID_PRIORITY]

    def test_edit(self, manager, store):
        updated = asyncio.run(manager.edit(1, apartment_number=" 102 ", priority=1))
        assert updated.apartment_number == "102"
        assert store.snapshot()[0].priority == 1

    def test_edit_unknown_resident(self, manager):
        with pytest.raises(ValidationError):
            asyncio.run(manager.edit(99, name="X"))

    def test_edit_unknown_field(self, manager):
        with pytest.raises(ValidationError):
            asyncio.run(manager.edit(1, building_id=2))

    def test_edit_into_duplicate(self, manager):
        with pytest.raises(ValidationError):
            asyncio.run(manager.edit(1, name="Anna Guðmundsdóttir"))

    def test_remove(self, manager, store):
        asyncio.run(manager.remove(2))
        assert manager.find(2) is None
        assert len(store.snapshot()) == 4

    def test_on_change_receives_reloaded_residents(self, store, auth):
        seen = []
        manager = ResidentManager(store, auth, 1, on_change=seen.append)
        asyncio.run(manager.load())
        asyncio.run(manager.remove(1))
        assert len(seen) == 1
        assert len(seen[0]) == 4

    def test_signed_out_drops_session(self, store, auth):
        manager = ResidentManager(store, auth, 1)
        auth.expire_session()
        with pytest.raises(AuthenticationExpired):
            asyncio.run(manager.load())
        assert store.calls == []

    def test_rejected_token_drops_session(self, store, auth):
        store.fail("fetch_residents", AuthenticationExpired("JWT expired"))
        manager = ResidentManager(store, auth, 1)
        with pytest.raises(AuthenticationExpired):
            asyncio.run(manager.load())
        assert not auth.is_authenticated

    def test_read_only_source(self, manager, store):
        store.writable = False
        with pytest.raises(ValidationError) as exc_info:
            asyncio.run(manager.remove(1))
        assert exc_info.value.issues == [messages.READ_ONLY_SOURCE]
