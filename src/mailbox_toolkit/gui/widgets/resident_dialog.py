"""
Add/edit resident dialog.

Fields are checked with ``resident_issues`` before the dialog accepts, so
the store only sees values that already passed local validation.
"""
from typing import Any, Iterable, Optional

from PySide6.QtCore import Slot
from PySide6.QtWidgets import (
    QCheckBox,
    QDialog,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
)

from mailbox_toolkit import messages
from mailbox_toolkit.core.models import Resident
from mailbox_toolkit.gui.styles.theme import get_styles
from mailbox_toolkit.workflow import resident_issues

_INVALID = object()


def parse_priority(text: str) -> Any:
    """Blank -> None, digits -> int, anything else is invalid."""
    text = text.strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        return _INVALID


class ResidentDialog(QDialog):
    """
    Dialog for one resident.

    Args:
        existing: Residents of the building (duplicate check)
        resident: Resident being edited; None to add a new one
    """

    def __init__(
        self,
        existing: Iterable[Resident] = (),
        resident: Optional[Resident] = None,
        parent=None,
    ):
        super().__init__(parent)
        self.existing = list(existing)
        self.resident = resident

        self.setWindowTitle("Breyta íbúa" if resident else "Bæta við íbúa")
        self.setModal(True)
        self.setMinimumWidth(380)

        layout = QVBoxLayout(self)
        form = QFormLayout()

        self.name_edit = QLineEdit(resident.name if resident else "")
        self.apartment_edit = QLineEdit(resident.apartment_number if resident else "")
        self.apartment_edit.setPlaceholderText("t.d. 101")
        priority = resident.priority if resident and resident.priority is not None else ""
        self.priority_edit = QLineEdit(str(priority))
        self.exclude_check = QCheckBox("Ekki birta í íbúalista")
        self.exclude_check.setChecked(bool(resident and resident.exclude_from_directory))

        form.addRow("Nafn", self.name_edit)
        form.addRow("Íbúð", self.apartment_edit)
        form.addRow("Forgangur (valfrjálst)", self.priority_edit)
        form.addRow("", self.exclude_check)
        layout.addLayout(form)

        self.error_label = QLabel()
        self.error_label.setObjectName("errorBanner")
        self.error_label.setWordWrap(True)
        self.error_label.hide()
        layout.addWidget(self.error_label)

        buttons = QHBoxLayout()
        buttons.addStretch()
        cancel = QPushButton("Hætta við")
        cancel.setStyleSheet(get_styles().BUTTON_SECONDARY)
        cancel.clicked.connect(self.reject)
        self.save_button = QPushButton("Vista breytingar" if resident else "Bæta við")
        self.save_button.setStyleSheet(get_styles().BUTTON_PRIMARY)
        self.save_button.setDefault(True)
        self.save_button.clicked.connect(self.submit)
        buttons.addWidget(cancel)
        buttons.addWidget(self.save_button)
        layout.addLayout(buttons)

    def values(self) -> dict[str, Any]:
        """Field values as passed to ResidentManager.add / edit."""
        priority = parse_priority(self.priority_edit.text())
        return {
            "name": self.name_edit.text().strip(),
            "apartment_number": self.apartment_edit.text().strip(),
            "priority": None if priority is _INVALID else priority,
            "exclude_from_directory": self.exclude_check.isChecked(),
        }

    def changed_fields(self) -> dict[str, Any]:
        """Only the fields that differ from the resident being edited."""
        values = self.values()
        if self.resident is None:
            return values
        return {
            key: value
            for key, value in values.items()
            if getattr(self.resident, key) != value
        }

    def issues(self) -> list[str]:
        priority = parse_priority(self.priority_edit.text())
        if priority is _INVALID:
            priority = self.priority_edit.text()
        return resident_issues(
            self.name_edit.text(),
            self.apartment_edit.text(),
            priority,
            self.existing,
            ignore_id=self.resident.id if self.resident else None,
        )

    def show_error(self, text: str) -> None:
        self.error_label.setText(text)
        self.error_label.show()

    @Slot()
    def submit(self):
        issues = self.issues()
        if issues:
            self.show_error(messages.VALIDATION_FAILED.format(issues="; ".join(issues)))
            return
        self.accept()
