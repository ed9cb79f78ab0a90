"""
Tests for the add/edit resident dialog.
"""

import pytest

from mailbox_toolkit import messages
from mailbox_toolkit.core.models import Resident
from mailbox_toolkit.gui.widgets.resident_dialog import ResidentDialog, parse_priority


@pytest.fixture
def existing():
    return [Resident("Anna", "101", id=1), Resident("Jón", "101", id=2, priority=0)]


class TestParsePriority:
    """Tests for parse_priority()."""

    def test_blank(self):
        assert parse_priority("  ") is None

    def test_number(self):
        assert parse_priority(" 3 ") == 3

    def test_invalid(self):
        value = parse_priority("fyrst")
        assert value is not None
        assert not isinstance(value, int)


class TestResidentDialog:
    """Tests for ResidentDialog."""

    def test_add_mode(self, qtbot, existing):
        dialog = ResidentDialog(existing)
        qtbot.addWidget(dialog)
        assert dialog.windowTitle() == "Bæta við íbúa"
        assert dialog.save_button.text() == "Bæta við"

    def test_values(self, qtbot, existing):
        dialog = ResidentDialog(existing)
        qtbot.addWidget(dialog)
        dialog.name_edit.setText(" Björn ")
        dialog.apartment_edit.setText("102")
        dialog.priority_edit.setText("1")
        dialog.exclude_check.setChecked(True)
        assert dialog.values() == {
            "name": "Björn",
            "apartment_number": "102",
            "priority": 1,
            "exclude_from_directory": True,
        }
        assert dialog.issues() == []

    def test_required_fields(self, qtbot, existing):
        dialog = ResidentDialog(existing)
        qtbot.addWidget(dialog)
        dialog.submit()
        assert dialog.result() != ResidentDialog.DialogCode.Accepted
        assert not dialog.error_label.isHidden()
        assert messages.REQUIRED_FIELDS in dialog.error_label.text()

    def test_invalid_priority(self, qtbot, existing):
        dialog = ResidentDialog(existing)
        qtbot.addWidget(dialog)
        dialog.name_edit.setText("Björn")
        dialog.apartment_edit.setText("102")
        dialog.priority_edit.setText("-1")
        assert dialog.issues() == [messages.INVALID_PRIORITY]
        dialog.priority_edit.setText("fyrst")
        assert dialog.issues() == [messages.INVALID_PRIORITY]

    def test_duplicate_name(self, qtbot, existing):
        dialog = ResidentDialog(existing)
        qtbot.addWidget(dialog)
        dialog.name_edit.setText("anna")
        dialog.apartment_edit.setText("101")
        assert len(dialog.issues()) == 1

    def test_edit_mode_prefilled(self, qtbot, existing):
        dialog = ResidentDialog(existing, existing[1])
        qtbot.addWidget(dialog)
        assert dialog.windowTitle() == "Breyta íbúa"
        assert dialog.name_edit.text() == "Jón"
        assert dialog.priority_edit.text() == "0"
        assert dialog.issues() == []
        assert dialog.changed_fields() == {}

    def test_changed_fields(self, qtbot, existing):
        dialog = ResidentDialog(existing, existing[1])
        qtbot.addWidget(dialog)
        dialog.priority_edit.setText("")
        dialog.exclude_check.setChecked(True)
        assert dialog.changed_fields() == {"priority": None, "exclude_from_directory": True}

    def test_valid_submit_accepts(self, qtbot, existing):
        dialog = ResidentDialog(existing)
        qtbot.addWidget(dialog)
        dialog.name_edit.setText("Björn")
        dialog.apartment_edit.setText("102")
        dialog.submit()
        assert dialog.result() == ResidentDialog.DialogCode.Accepted
