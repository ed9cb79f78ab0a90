"""
Multi-apartment intake dialog.

One row per apartment; names are entered one per line in priority order.
The whole batch is validated before the dialog accepts.
"""
from typing import Iterable

from PySide6.QtCore import Slot
from PySide6.QtWidgets import (
    QDialog,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QPlainTextEdit,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
)

from mailbox_toolkit import messages
from mailbox_toolkit.core.models import Resident
from mailbox_toolkit.gui.styles.theme import get_styles
from mailbox_toolkit.gui.utils.icons import MaterialIcons
from mailbox_toolkit.workflow import PendingApartment, validate_batch

APARTMENT_COLUMN = 0
NAMES_COLUMN = 1


class IntakeDialog(QDialog):
    def __init__(self, existing: Iterable[Resident] = (), parent=None):
        super().__init__(parent)
        self.existing = list(existing)

        self.setWindowTitle("Skrá margar íbúðir")
        self.setModal(True)
        self.resize(560, 420)

        layout = QVBoxLayout(self)
        hint = QLabel("Eitt nafn í hverja línu, í forgangsröð.")
        hint.setObjectName("statusMessage")
        layout.addWidget(hint)

        self.table = QTableWidget(0, 2)
        self.table.setHorizontalHeaderLabels(["Íbúð", "Nöfn"])
        self.table.horizontalHeader().setSectionResizeMode(
            APARTMENT_COLUMN, QHeaderView.ResizeMode.ResizeToContents
        )
        self.table.horizontalHeader().setSectionResizeMode(
            NAMES_COLUMN, QHeaderView.ResizeMode.Stretch
        )
        self.table.verticalHeader().setVisible(False)
        layout.addWidget(self.table)

        row_buttons = QHBoxLayout()
        add_row = QPushButton(MaterialIcons.plus(), "Bæta við íbúð")
        add_row.setStyleSheet(get_styles().BUTTON_PRIMARY)
        add_row.clicked.connect(lambda: self.add_apartment())
        remove_row = QPushButton(MaterialIcons.delete(), "Fjarlægja")
        remove_row.setStyleSheet(get_styles().BUTTON_SECONDARY)
        remove_row.clicked.connect(self.remove_selected)
        row_buttons.addWidget(add_row)
        row_buttons.addWidget(remove_row)
        row_buttons.addStretch()
        layout.addLayout(row_buttons)

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
        self.save_button = QPushButton("Vista")
        self.save_button.setStyleSheet(get_styles().BUTTON_PRIMARY)
        self.save_button.clicked.connect(self.submit)
        buttons.addWidget(cancel)
        buttons.addWidget(self.save_button)
        layout.addLayout(buttons)

        self.add_apartment()

    def add_apartment(self, apartment_number: str = "", names: Iterable[str] = ()) -> int:
        row = self.table.rowCount()
        self.table.insertRow(row)
        self.table.setItem(row, APARTMENT_COLUMN, QTableWidgetItem(apartment_number))
        editor = QPlainTextEdit("\n".join(names))
        editor.setTabChangesFocus(True)
        self.table.setCellWidget(row, NAMES_COLUMN, editor)
        self.table.setRowHeight(row, 90)
        return row

    @Slot()
    def remove_selected(self):
        rows = sorted({index.row() for index in self.table.selectedIndexes()}, reverse=True)
        for row in rows:
            self.table.removeRow(row)

    def pending(self) -> list[PendingApartment]:
        batch = []
        for row in range(self.table.rowCount()):
            item = self.table.item(row, APARTMENT_COLUMN)
            editor = self.table.cellWidget(row, NAMES_COLUMN)
            names = editor.toPlainText().splitlines() if editor is not None else []
            batch.append(PendingApartment(item.text() if item else "", names))
        # Rows left completely blank are ignored
        return [p for p in batch if p.clean_apartment or p.clean_names]

    def issues(self) -> list[str]:
        batch = self.pending()
        if not batch:
            return [messages.APARTMENT_REQUIRED]
        return validate_batch(batch, self.existing)

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
