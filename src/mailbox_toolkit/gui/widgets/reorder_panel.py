"""
Priority reorder panel.

Shows the residents of one apartment in priority order. In edit mode the
list accepts drag and drop (and the up/down buttons); every move is
applied to a PriorityReorderSession, which owns the working copy and
writes the new priorities on save.
"""
import logging
from typing import Optional

from PySide6.QtCore import Qt, QTimer, Signal, Slot
from PySide6.QtWidgets import (
    QAbstractItemView,
    QComboBox,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from mailbox_toolkit import messages
from mailbox_toolkit.auth import AuthProvider
from mailbox_toolkit.core.errors import MailboxToolkitError
from mailbox_toolkit.core.models import Resident
from mailbox_toolkit.gui.styles.theme import get_styles
from mailbox_toolkit.gui.utils.icons import MaterialIcons
from mailbox_toolkit.gui.worker import run_async
from mailbox_toolkit.ordering import DEFAULT_LOCALE, ordered_apartment_entries
from mailbox_toolkit.store import RecordStore
from mailbox_toolkit.workflow import PriorityReorderSession, ReorderState

logger = logging.getLogger(__name__)

RESIDENT_ROLE = Qt.ItemDataRole.UserRole


class ReorderPanel(QWidget):
    # Residents as saved, so the window can refetch the building
    saved = Signal(list)
    # Emitted after a failed save; some priorities may already be stored
    reload_requested = Signal()

    def __init__(self, store: RecordStore, auth: AuthProvider, parent=None):
        super().__init__(parent)
        self.store = store
        self.auth = auth
        self.locale = DEFAULT_LOCALE
        self.session: Optional[PriorityReorderSession] = None
        self._residents: list[Resident] = []
        self._pending: Optional[list[Resident]] = None
        self._syncing = False

        layout = QVBoxLayout(self)

        top = QHBoxLayout()
        top.addWidget(QLabel("Íbúð"))
        self.apartment_combo = QComboBox()
        self.apartment_combo.setMinimumWidth(120)
        self.apartment_combo.currentIndexChanged.connect(self._on_apartment_changed)
        top.addWidget(self.apartment_combo)
        top.addStretch()
        layout.addLayout(top)

        self.list_widget = QListWidget()
        self.list_widget.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        self.list_widget.setDefaultDropAction(Qt.DropAction.MoveAction)
        self.list_widget.model().rowsMoved.connect(self._on_rows_moved)
        self.list_widget.currentRowChanged.connect(lambda _row: self._update_buttons())
        layout.addWidget(self.list_widget)

        self.error_label = QLabel()
        self.error_label.setObjectName("errorBanner")
        self.error_label.setWordWrap(True)
        self.error_label.hide()
        layout.addWidget(self.error_label)

        buttons = QHBoxLayout()
        self.edit_button = QPushButton(MaterialIcons.drag(), "Breyta röð")
        self.edit_button.setStyleSheet(get_styles().BUTTON_SECONDARY)
        self.edit_button.clicked.connect(self.begin_editing)
        self.up_button = QPushButton(MaterialIcons.arrow_up(), "")
        self.up_button.setToolTip("Færa upp")
        self.up_button.clicked.connect(lambda: self.move_selected(-1))
        self.down_button = QPushButton(MaterialIcons.arrow_down(), "")
        self.down_button.setToolTip("Færa niður")
        self.down_button.clicked.connect(lambda: self.move_selected(1))
        self.cancel_button = QPushButton("Hætta við")
        self.cancel_button.setStyleSheet(get_styles().BUTTON_SECONDARY)
        self.cancel_button.clicked.connect(self.cancel)
        self.save_button = QPushButton(MaterialIcons.content_save("white"), "Vista röð")
        self.save_button.setStyleSheet(get_styles().BUTTON_PRIMARY)
        self.save_button.clicked.connect(self.save)
        buttons.addWidget(self.edit_button)
        buttons.addWidget(self.up_button)
        buttons.addWidget(self.down_button)
        buttons.addStretch()
        buttons.addWidget(self.cancel_button)
        buttons.addWidget(self.save_button)
        layout.addLayout(buttons)

        self._update_buttons()

    # ─────────────────────────────────────────────────────────────────────────
    # Data
    # ─────────────────────────────────────────────────────────────────────────

    def set_residents(self, residents: list[Resident]) -> None:
        """
        Show a building's residents.

        While an apartment is being edited the new list is held back and
        applied when editing ends.
        """
        if self.session is not None and self.session.state is not ReorderState.VIEWING:
            self._pending = list(residents)
            return
        self._pending = None
        self._residents = list(residents)

        current = self.apartment_combo.currentText()
        entries = ordered_apartment_entries(self._residents, self.locale)
        self.apartment_combo.blockSignals(True)
        self.apartment_combo.clear()
        for entry in entries:
            self.apartment_combo.addItem(entry.apartment_number)
        index = self.apartment_combo.findText(current)
        self.apartment_combo.setCurrentIndex(index if index >= 0 else 0)
        self.apartment_combo.blockSignals(False)
        self._on_apartment_changed()

    def apartment_residents(self, apartment_number: str) -> list[Resident]:
        return [r for r in self._residents if r.apartment_number == apartment_number]

    def _on_apartment_changed(self, _index: int = 0):
        apartment = self.apartment_combo.currentText()
        if not apartment:
            self.session = None
        else:
            self.session = PriorityReorderSession(
                self.store,
                self.apartment_residents(apartment),
                auth=self.auth,
                locale=self.locale,
            )
        self.error_label.hide()
        self._refresh_list()

    def _refresh_list(self) -> None:
        self._syncing = True
        self.list_widget.clear()
        residents = self.session.working if self.session else []
        for resident in residents:
            item = QListWidgetItem(resident.name)
            item.setData(RESIDENT_ROLE, resident)
            self.list_widget.addItem(item)
        self._syncing = False

        editing = self.session is not None and self.session.is_editing
        self.list_widget.setDragDropMode(
            QAbstractItemView.DragDropMode.InternalMove
            if editing
            else QAbstractItemView.DragDropMode.NoDragDrop
        )
        self._update_buttons()

    def displayed_names(self) -> list[str]:
        return [self.list_widget.item(i).text() for i in range(self.list_widget.count())]

    # ─────────────────────────────────────────────────────────────────────────
    # Editing
    # ─────────────────────────────────────────────────────────────────────────

    @Slot()
    def begin_editing(self):
        if self.session is None:
            return
        self.session.begin_editing()
        self.error_label.hide()
        self._refresh_list()

    def move_resident(self, from_index: int, to_index: int) -> None:
        """Apply one move to the session and redraw the list."""
        if self.session is None or not self.session.is_editing:
            return
        self.session.move_resident(from_index, to_index)
        self._refresh_list()
        self.list_widget.setCurrentRow(to_index)

    def move_selected(self, offset: int) -> None:
        row = self.list_widget.currentRow()
        target = row + offset
        if row < 0 or not 0 <= target < self.list_widget.count():
            return
        self.move_resident(row, target)

    def _on_rows_moved(self, _parent, start, _end, _destination, row):
        """Mirror a drag-and-drop move into the session."""
        if self._syncing or self.session is None or not self.session.is_editing:
            return
        # ``row`` is the insertion point before the item was removed
        to_index = row - 1 if row > start else row
        self.session.move_resident(start, to_index)
        self._check_list_matches_session()

    def _check_list_matches_session(self) -> None:
        shown = [self.list_widget.item(i).data(RESIDENT_ROLE) for i in range(self.list_widget.count())]
        if shown != self.session.working:
            logger.warning("Reorder list out of step with the working copy; redrawing")
            QTimer.singleShot(0, self._refresh_list)
        else:
            self._update_buttons()

    @Slot()
    def cancel(self):
        if self.session is None:
            return
        self.session.cancel()
        self.error_label.hide()
        self._refresh_list()
        self._apply_pending()

    @Slot()
    def save(self):
        session = self.session
        if session is None or not session.is_editing:
            return
        if not session.dirty:
            session.cancel()
            self._refresh_list()
            self._apply_pending()
            return

        self.error_label.hide()
        try:
            ordered = session.begin_save()
        except MailboxToolkitError as e:
            self._on_save_failed(e)
            return

        # Only the store writes run on the worker; the session is updated here
        self._set_saving(True)
        run_async(
            self,
            lambda: session.write_priorities(ordered),
            lambda results: self._on_written(session, ordered, results),
            lambda error: self._on_write_failed(session, error),
        )

    def _on_written(self, session: PriorityReorderSession, ordered, results):
        self._set_saving(False)
        try:
            session.finish_save(ordered, results)
        except Exception as e:
            self._on_save_failed(e)
            # Some writes may have landed
            self.reload_requested.emit()
            return
        self._refresh_list()
        self.saved.emit(session.current)
        self._apply_pending()

    def _on_write_failed(self, session: PriorityReorderSession, error: BaseException):
        session.abort_save()
        self._set_saving(False)
        self._on_save_failed(error)
        self.reload_requested.emit()

    def _on_save_failed(self, error: BaseException):
        logger.error(f"Saving priorities failed: {error}")
        self.error_label.setText(messages.user_message(error, "save"))
        self.error_label.show()
        self._refresh_list()

    def _apply_pending(self) -> None:
        if self._pending is not None:
            self.set_residents(self._pending)

    # ─────────────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────────────

    def _set_saving(self, saving: bool) -> None:
        self.list_widget.setEnabled(not saving)
        self.apartment_combo.setEnabled(not saving)
        self._update_buttons(saving)

    def _update_buttons(self, saving: bool = False):
        editing = self.session is not None and self.session.is_editing
        row = self.list_widget.currentRow()
        count = self.list_widget.count()
        self.apartment_combo.setEnabled(not editing and not saving)
        self.edit_button.setEnabled(
            self.session is not None and not editing and not saving and count > 1
        )
        self.up_button.setEnabled(editing and not saving and row > 0)
        self.down_button.setEnabled(editing and not saving and 0 <= row < count - 1)
        self.cancel_button.setEnabled(editing and not saving)
        self.save_button.setEnabled(editing and not saving)
