"""
Resident table with add/edit/delete.

Rows are grouped by apartment (apartment order, then priority). Every
change goes through ResidentManager on a worker thread; the manager
reloads the building afterwards and ``residents_changed`` carries the new
list to the rest of the window.
"""
import logging
from typing import Optional

from PySide6.QtCore import Qt, Signal, Slot
from PySide6.QtWidgets import (
    QAbstractItemView,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QMessageBox,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from mailbox_toolkit import messages
from mailbox_toolkit.auth import AuthProvider
from mailbox_toolkit.core.models import Resident
from mailbox_toolkit.gui.styles.theme import get_styles
from mailbox_toolkit.gui.utils.icons import MaterialIcons
from mailbox_toolkit.gui.widgets.intake_dialog import IntakeDialog
from mailbox_toolkit.gui.widgets.resident_dialog import ResidentDialog
from mailbox_toolkit.gui.worker import run_async
from mailbox_toolkit.ordering import DEFAULT_LOCALE, ordered_apartment_entries
from mailbox_toolkit.store import RecordStore
from mailbox_toolkit.workflow import ResidentManager, submit_batch

logger = logging.getLogger(__name__)

COLUMNS = ["Íbúð", "Nafn", "Forgangur", "Í íbúalista"]
DELETE_CONFIRMATION = "Ertu viss um að þú viljir eyða þessum íbúa?"


class ResidentTable(QWidget):
    residents_changed = Signal(list)

    def __init__(self, store: RecordStore, auth: AuthProvider, parent=None):
        super().__init__(parent)
        self.store = store
        self.auth = auth
        self.manager: Optional[ResidentManager] = None
        self.locale = DEFAULT_LOCALE
        self._busy = False
        self._operation = "fetch"

        layout = QVBoxLayout(self)

        self.table = QTableWidget(0, len(COLUMNS))
        self.table.setHorizontalHeaderLabels(COLUMNS)
        self.table.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        self.table.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        self.table.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        self.table.setAlternatingRowColors(True)
        self.table.verticalHeader().setVisible(False)
        self.table.horizontalHeader().setSectionResizeMode(1, QHeaderView.ResizeMode.Stretch)
        self.table.itemSelectionChanged.connect(self._update_buttons)
        self.table.itemDoubleClicked.connect(lambda _item: self.edit_selected())
        layout.addWidget(self.table)

        self.empty_label = QLabel(messages.EMPTY_RESIDENTS)
        self.empty_label.setObjectName("statusMessage")
        self.empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.empty_label.hide()
        layout.addWidget(self.empty_label)

        self.error_label = QLabel()
        self.error_label.setObjectName("errorBanner")
        self.error_label.setWordWrap(True)
        self.error_label.hide()
        layout.addWidget(self.error_label)

        buttons = QHBoxLayout()
        self.add_button = QPushButton(MaterialIcons.plus(), "Bæta við íbúa")
        self.add_button.setStyleSheet(get_styles().BUTTON_PRIMARY)
        self.add_button.clicked.connect(self.add_resident)
        self.intake_button = QPushButton(MaterialIcons.playlist_plus(), "Skrá margar íbúðir")
        self.intake_button.setStyleSheet(get_styles().BUTTON_SECONDARY)
        self.intake_button.clicked.connect(self.add_apartments)
        self.edit_button = QPushButton(MaterialIcons.pencil(), "Breyta")
        self.edit_button.setStyleSheet(get_styles().BUTTON_SECONDARY)
        self.edit_button.clicked.connect(self.edit_selected)
        self.delete_button = QPushButton(MaterialIcons.delete(), "Eyða")
        self.delete_button.setStyleSheet(get_styles().BUTTON_SECONDARY)
        self.delete_button.clicked.connect(self.delete_selected)
        for button in (self.add_button, self.intake_button, self.edit_button, self.delete_button):
            buttons.addWidget(button)
        buttons.addStretch()
        layout.addLayout(buttons)

        self._update_buttons()

    # ─────────────────────────────────────────────────────────────────────────
    # Data
    # ─────────────────────────────────────────────────────────────────────────

    def set_manager(self, manager: Optional[ResidentManager]) -> None:
        """Show the residents the manager last loaded (None clears the table)."""
        self.manager = manager
        self.error_label.hide()
        self.show_residents(manager.residents if manager else [])

    def show_residents(self, residents: list[Resident]) -> None:
        self.table.setRowCount(0)
        row = 0
        for entry in ordered_apartment_entries(residents, self.locale):
            for resident in entry.residents:
                self.table.insertRow(row)
                apartment = QTableWidgetItem(resident.apartment_number)
                apartment.setData(Qt.ItemDataRole.UserRole, resident.id)
                priority = "" if resident.priority is None else str(resident.priority)
                listed = "Nei" if resident.exclude_from_directory else "Já"
                self.table.setItem(row, 0, apartment)
                self.table.setItem(row, 1, QTableWidgetItem(resident.name))
                self.table.setItem(row, 2, QTableWidgetItem(priority))
                self.table.setItem(row, 3, QTableWidgetItem(listed))
                row += 1
        self.empty_label.setVisible(self.manager is not None and row == 0)
        self._update_buttons()

    def selected_resident(self) -> Optional[Resident]:
        if self.manager is None:
            return None
        rows = self.table.selectionModel().selectedRows()
        if not rows:
            return None
        item = self.table.item(rows[0].row(), 0)
        resident_id = item.data(Qt.ItemDataRole.UserRole) if item else None
        return self.manager.find(resident_id) if resident_id is not None else None

    # ─────────────────────────────────────────────────────────────────────────
    # Actions
    # ─────────────────────────────────────────────────────────────────────────

    @Slot()
    def add_resident(self):
        if self.manager is None:
            return
        dialog = ResidentDialog(self.manager.residents, parent=self)
        if dialog.exec() != ResidentDialog.DialogCode.Accepted:
            return
        values = dialog.values()
        manager = self.manager
        self._run(
            lambda: manager.add(
                values["name"],
                values["apartment_number"],
                values["priority"],
                exclude=values["exclude_from_directory"],
            ),
            "save",
        )

    @Slot()
    def add_apartments(self):
        if self.manager is None:
            return
        dialog = IntakeDialog(self.manager.residents, parent=self)
        if dialog.exec() != IntakeDialog.DialogCode.Accepted:
            return
        pending = dialog.pending()
        manager = self.manager

        async def submit_and_reload():
            await submit_batch(
                self.store, self.auth, manager.building_id, pending, manager.residents
            )
            return await manager.load()

        self._run(submit_and_reload, "save")

    @Slot()
    def edit_selected(self):
        resident = self.selected_resident()
        if resident is None or self.manager is None or not self.store.writable:
            return
        dialog = ResidentDialog(self.manager.residents, resident, parent=self)
        if dialog.exec() != ResidentDialog.DialogCode.Accepted:
            return
        fields = dialog.changed_fields()
        if not fields:
            return
        manager = self.manager
        self._run(lambda: manager.edit(resident.id, **fields), "save")

    @Slot()
    def delete_selected(self):
        resident = self.selected_resident()
        if resident is None or self.manager is None:
            return
        answer = QMessageBox.question(
            self,
            "Eyða íbúa",
            f"{DELETE_CONFIRMATION}\n\n{resident.name} ({resident.apartment_number})",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
            QMessageBox.StandardButton.No,
        )
        if answer != QMessageBox.StandardButton.Yes:
            return
        manager = self.manager
        self._run(lambda: manager.remove(resident.id), "delete")

    # ─────────────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────────────

    def _run(self, factory, operation: str) -> None:
        self._operation = operation
        self._set_busy(True)
        self.error_label.hide()
        run_async(self, factory, self._on_changed, self._on_failed)

    def _on_changed(self, _result=None):
        self._set_busy(False)
        if self.manager is None:
            return
        residents = self.manager.residents
        self.show_residents(residents)
        self.residents_changed.emit(residents)

    def _on_failed(self, error: BaseException):
        self._set_busy(False)
        logger.error(f"Resident {self._operation} failed: {error}")
        self.error_label.setText(messages.user_message(error, self._operation))
        self.error_label.show()

    def _set_busy(self, busy: bool) -> None:
        self._busy = busy
        self._update_buttons()

    def _update_buttons(self):
        ready = self.manager is not None and not self._busy
        writable = ready and self.store.writable
        has_selection = bool(self.table.selectionModel().selectedRows())
        self.add_button.setEnabled(writable)
        self.intake_button.setEnabled(writable)
        self.edit_button.setEnabled(writable and has_selection)
        self.delete_button.setEnabled(writable and has_selection)
        if ready and not self.store.writable:
            self.add_button.setToolTip(messages.READ_ONLY_SOURCE)
