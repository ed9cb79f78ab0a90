"""
Tests for the priority reorder panel.
"""

import threading

import pytest

from mailbox_toolkit.core.errors import DataAccessError
from mailbox_toolkit.core.models import Building
from mailbox_toolkit.gui.widgets.reorder_panel import ReorderPanel
from mailbox_toolkit.store import InMemoryRecordStore
from mailbox_toolkit.workflow import ReorderState


@pytest.fixture
def apartment_store(make_residents):
    return InMemoryRecordStore([Building(1, "Hátún 10")], make_residents("A", "B", "C"))


@pytest.fixture
def panel(qtbot, apartment_store, auth):
    widget = ReorderPanel(apartment_store, auth)
    qtbot.addWidget(widget)
    widget.set_residents(apartment_store.snapshot())
    return widget


class TestReorderPanel:
    """Tests for viewing and editing."""

    def test_shows_apartment(self, panel):
        assert panel.apartment_combo.currentText() == "101"
        assert panel.displayed_names() == ["A", "B", "C"]
        assert panel.session.state is ReorderState.VIEWING

    def test_buttons_follow_state(self, panel):
        assert panel.edit_button.isEnabled()
        assert not panel.save_button.isEnabled()
        panel.begin_editing()
        assert not panel.edit_button.isEnabled()
        assert panel.save_button.isEnabled()
        assert not panel.apartment_combo.isEnabled()

    def test_move_ignored_when_not_editing(self, panel):
        panel.move_resident(2, 0)
        assert panel.displayed_names() == ["A", "B", "C"]

    def test_move_resident(self, panel):
        panel.begin_editing()
        panel.move_resident(2, 0)
        assert panel.displayed_names() == ["C", "A", "B"]
        assert panel.list_widget.currentRow() == 0

    def test_move_selected(self, panel):
        panel.begin_editing()
        panel.list_widget.setCurrentRow(0)
        panel.move_selected(1)
        assert panel.displayed_names() == ["B", "A", "C"]
        panel.move_selected(-1)
        assert panel.displayed_names() == ["A", "B", "C"]

    def test_move_selected_at_edge(self, panel):
        panel.begin_editing()
        panel.list_widget.setCurrentRow(0)
        panel.move_selected(-1)
        assert panel.displayed_names() == ["A", "B", "C"]

    def test_cancel_restores_order(self, panel, apartment_store):
        panel.begin_editing()
        panel.move_resident(2, 0)
        panel.cancel()
        assert panel.displayed_names() == ["A", "B", "C"]
        assert apartment_store.calls == []

    def test_save_without_changes_writes_nothing(self, panel, apartment_store):
        panel.begin_editing()
        panel.save()
        assert panel.session.state is ReorderState.VIEWING
        assert apartment_store.calls == []

    def test_save_writes_priorities(self, qtbot, panel, apartment_store):
        panel.begin_editing()
        panel.move_resident(2, 0)
        with qtbot.waitSignal(panel.saved, timeout=5000) as blocker:
            panel.save()

        assert [r.name for r in blocker.args[0]] == ["C", "A", "B"]
        priorities = {r.name: r.priority for r in apartment_store.snapshot()}
        assert priorities == {"C": 0, "A": 1, "B": 2}
        assert panel.displayed_names() == ["C", "A", "B"]

    def test_failed_save_keeps_working_copy(self, qtbot, panel, apartment_store):
        apartment_store.fail("update_resident", DataAccessError("offline"))
        panel.begin_editing()
        panel.move_resident(2, 0)
        panel.save()

        qtbot.waitUntil(lambda: not panel.error_label.isHidden(), timeout=5000)
        assert panel.session.state is ReorderState.EDITING
        assert panel.displayed_names() == ["C", "A", "B"]
        assert panel.save_button.isEnabled()

    def test_session_updated_on_gui_thread(self, qtbot, panel):
        threads = []
        panel.begin_editing()
        panel.session.on_saved = lambda _residents: threads.append(threading.current_thread())
        panel.move_resident(2, 0)
        with qtbot.waitSignal(panel.saved, timeout=5000):
            panel.save()
        assert threads == [threading.main_thread()]

    def test_partial_failure_requests_reload(self, qtbot, panel, apartment_store):
        apartment_store.fail_update_for(2, DataAccessError("boom"))
        panel.begin_editing()
        panel.move_resident(2, 0)
        with qtbot.waitSignal(panel.reload_requested, timeout=5000):
            panel.save()

        assert not panel.error_label.isHidden()
        assert panel.session.state is ReorderState.EDITING
        panel.cancel()
        # Order as stored: C=0, A=1, B unchanged
        assert panel.displayed_names() == ["C", "A", "B"]

    def test_refresh_while_editing_is_deferred(self, panel, make_residents):
        panel.begin_editing()
        panel.move_resident(2, 0)
        panel.set_residents(make_residents("X", "Y"))
        assert panel.displayed_names() == ["C", "A", "B"]

        panel.cancel()
        assert panel.displayed_names() == ["X", "Y"]

    def test_switching_apartment(self, panel, make_residents):
        residents = make_residents("A", "B") + make_residents("Z", apartment="102")
        panel.set_residents(residents)
        panel.apartment_combo.setCurrentIndex(1)
        assert panel.displayed_names() == ["Z"]
        assert not panel.edit_button.isEnabled()

    def test_no_residents(self, panel):
        panel.set_residents([])
        assert panel.session is None
        assert panel.displayed_names() == []
        assert not panel.edit_button.isEnabled()
