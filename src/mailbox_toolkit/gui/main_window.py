"""
Main window.

Layout: building selector on top, tabs for residents, priority order and
documents, console log below. All backend calls run on worker threads
(``gui.worker``). Building fetches carry a request token; a result for a
building that is no longer selected is dropped.
"""
import logging
import queue
from typing import Optional

from PySide6.QtCore import Qt, QTimer, Signal, Slot
from PySide6.QtGui import QAction, QActionGroup
from PySide6.QtWidgets import (
    QApplication,
    QComboBox,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QSplitter,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from mailbox_toolkit import __version__, messages
from mailbox_toolkit.auth import require_authenticated
from mailbox_toolkit.backend import DEMO_EMAIL, Backend
from mailbox_toolkit.config import AppConfig
from mailbox_toolkit.core.errors import AuthenticationExpired
from mailbox_toolkit.core.models import Building, Resident
from mailbox_toolkit.gui.models.settings import SettingsStore
from mailbox_toolkit.gui.styles.theme import get_stylesheet, set_dark_mode
from mailbox_toolkit.gui.utils.icons import MaterialIcons
from mailbox_toolkit.gui.utils.logging_utils import (
    attach_queue_handler,
    detach_queue_handler,
    drain_queue,
)
from mailbox_toolkit.gui.widgets.console_widget import ConsoleWidget
from mailbox_toolkit.gui.widgets.document_panel import DocumentPanel
from mailbox_toolkit.gui.widgets.login_dialog import LoginDialog
from mailbox_toolkit.gui.widgets.reorder_panel import ReorderPanel
from mailbox_toolkit.gui.widgets.resident_table import ResidentTable
from mailbox_toolkit.gui.worker import run_async, wait_for_workers
from mailbox_toolkit.ordering import supported_locales
from mailbox_toolkit.workflow import ResidentManager

logger = logging.getLogger(__name__)

LOG_POLL_MS = 100


class MainWindow(QMainWindow):
    # Emitted from whichever thread changed the session; delivered on the GUI thread
    session_changed = Signal(object)

    def __init__(self, backend: Backend, config: AppConfig, settings: SettingsStore):
        super().__init__()
        self.backend = backend
        self.config = config
        self.settings = settings
        self.locale = settings.get_locale() or config.locale

        self.buildings: list[Building] = []
        self.building: Optional[Building] = None
        self.manager: Optional[ResidentManager] = None
        self._request_token = 0
        self._signing_out = False
        self._login_open = False

        self.setWindowTitle("Póstkassar og íbúalisti")

        self.log_queue: queue.Queue = queue.Queue()
        self._log_handler = attach_queue_handler(self.log_queue, "mailbox_toolkit")
        self.log_timer = QTimer(self)
        self.log_timer.timeout.connect(self._drain_log_queue)
        self.log_timer.start(LOG_POLL_MS)

        self._build_menu()
        self._build_ui()
        self._restore_state()

        self.session_changed.connect(self._on_session_changed)
        backend.auth.add_listener(self.session_changed.emit)

    # ─────────────────────────────────────────────────────────────────────────
    # Layout
    # ─────────────────────────────────────────────────────────────────────────

    def _build_menu(self):
        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu("Skrá")
        refresh_action = QAction(MaterialIcons.refresh(), "Endurhlaða", self)
        refresh_action.setShortcut("F5")
        refresh_action.triggered.connect(self.refresh)
        file_menu.addAction(refresh_action)
        logout_action = QAction(MaterialIcons.logout(), "Skrá út", self)
        logout_action.triggered.connect(self.sign_out)
        file_menu.addAction(logout_action)
        file_menu.addSeparator()
        quit_action = QAction("Hætta", self)
        quit_action.setShortcut("Ctrl+Q")
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

        settings_menu = menu_bar.addMenu("Stillingar")
        self.dark_mode_action = QAction("Dökkt útlit", self)
        self.dark_mode_action.setCheckable(True)
        self.dark_mode_action.setChecked(self.settings.get_dark_mode())
        self.dark_mode_action.toggled.connect(self._toggle_dark_mode)
        settings_menu.addAction(self.dark_mode_action)

        self.footer_action = QAction("Síðufótur í PDF", self)
        self.footer_action.setCheckable(True)
        self.footer_action.setChecked(self.settings.get_show_footer())
        self.footer_action.toggled.connect(self.settings.set_show_footer)
        settings_menu.addAction(self.footer_action)

        locale_menu = settings_menu.addMenu("Stafrófsröð")
        self.locale_group = QActionGroup(self)
        for locale in supported_locales():
            action = QAction(locale, self, checkable=True)
            action.setChecked(locale == self.locale)
            action.triggered.connect(lambda _checked, value=locale: self.set_locale(value))
            self.locale_group.addAction(action)
            locale_menu.addAction(action)

        help_menu = menu_bar.addMenu("Hjálp")
        about_action = QAction("Um forritið", self)
        about_action.triggered.connect(self._show_about)
        help_menu.addAction(about_action)

    def _build_ui(self):
        central = QWidget()
        layout = QVBoxLayout(central)

        header = QHBoxLayout()
        header.addWidget(QLabel("Hús"))
        self.building_combo = QComboBox()
        self.building_combo.setMinimumWidth(240)
        self.building_combo.currentIndexChanged.connect(self._on_building_selected)
        header.addWidget(self.building_combo)
        self.refresh_button = QPushButton(MaterialIcons.refresh(), "")
        self.refresh_button.setToolTip("Endurhlaða")
        self.refresh_button.clicked.connect(self.refresh)
        header.addWidget(self.refresh_button)
        header.addStretch()
        self.user_label = QLabel()
        self.user_label.setObjectName("statusMessage")
        header.addWidget(self.user_label)
        layout.addLayout(header)

        self.error_label = QLabel()
        self.error_label.setObjectName("errorBanner")
        self.error_label.setWordWrap(True)
        self.error_label.hide()
        layout.addWidget(self.error_label)

        store, auth = self.backend.store, self.backend.auth
        self.resident_table = ResidentTable(store, auth)
        self.reorder_panel = ReorderPanel(store, auth)
        self.document_panel = DocumentPanel(store, auth, self.settings)
        for widget in (self.resident_table, self.reorder_panel, self.document_panel):
            widget.locale = self.locale

        self.resident_table.residents_changed.connect(self._on_residents_changed)
        self.reorder_panel.saved.connect(lambda _residents: self.refresh())
        self.reorder_panel.reload_requested.connect(self.refresh)

        self.tabs = QTabWidget()
        self.tabs.addTab(self.resident_table, "Íbúar")
        self.tabs.addTab(self.reorder_panel, "Forgangsröðun")
        self.tabs.addTab(self.document_panel, "Skjöl")
        self.tabs.currentChanged.connect(self.settings.set_main_tab)

        self.console = ConsoleWidget()

        self.splitter = QSplitter(Qt.Orientation.Vertical)
        self.splitter.addWidget(self.tabs)
        self.splitter.addWidget(self.console)
        self.splitter.setStretchFactor(0, 4)
        self.splitter.setStretchFactor(1, 1)
        layout.addWidget(self.splitter)

        self.setCentralWidget(central)
        self.statusBar().showMessage(f"Mailbox Toolkit v{__version__}")

    def _restore_state(self):
        geometry = self.settings.get_window_geometry()
        if not geometry or not self.restoreGeometry(bytes.fromhex(geometry)):
            self.resize(1000, 720)
        splitter_state = self.settings.get_splitter_state()
        if splitter_state:
            self.splitter.restoreState(bytes.fromhex(splitter_state))
        tab = self.settings.get_main_tab()
        if tab is not None and tab < self.tabs.count():
            self.tabs.setCurrentIndex(tab)

    # ─────────────────────────────────────────────────────────────────────────
    # Session
    # ─────────────────────────────────────────────────────────────────────────

    def start(self) -> bool:
        """Sign in and load buildings. False if the user closed the login."""
        if not self.backend.auth.is_authenticated and not self.request_login():
            return False
        self.load_buildings()
        return True

    def request_login(self, notice: Optional[str] = None) -> bool:
        email = DEMO_EMAIL if self.backend.demo else self.settings.get_last_email()
        self._login_open = True
        try:
            dialog = LoginDialog(self.backend.auth, email=email, notice=notice, parent=self)
            accepted = dialog.exec() == LoginDialog.DialogCode.Accepted
        finally:
            self._login_open = False
        if accepted and not self.backend.demo:
            self.settings.set_last_email(dialog.email)
        return accepted

    @Slot()
    def sign_out(self):
        self._signing_out = True
        run_async(
            self,
            self.backend.auth.logout,
            lambda _r: self._after_sign_out(),
            lambda error: self._after_sign_out(error),
        )

    def _after_sign_out(self, error: Optional[BaseException] = None):
        self._signing_out = False
        if error is not None:
            logger.warning(f"Sign-out failed: {error}")
        self._clear_building()
        if self.request_login():
            self.load_buildings()
        else:
            self.close()

    @Slot(object)
    def _on_session_changed(self, user):
        if user is not None:
            self.user_label.setText(user.email)
            return
        self.user_label.clear()
        if self._signing_out or self._login_open:
            return
        # Session dropped by the backend
        self.statusBar().showMessage(messages.SESSION_EXPIRED)
        QTimer.singleShot(0, self._relogin)

    def _relogin(self):
        if self.backend.auth.is_authenticated or self._login_open:
            return
        if self.request_login(messages.SESSION_EXPIRED):
            self.refresh()
        else:
            self.close()

    # ─────────────────────────────────────────────────────────────────────────
    # Buildings and residents
    # ─────────────────────────────────────────────────────────────────────────

    def load_buildings(self):
        store, auth = self.backend.store, self.backend.auth

        async def fetch_buildings():
            try:
                require_authenticated(auth)
                return await store.fetch_buildings()
            except AuthenticationExpired:
                auth.expire_session()
                raise

        self.error_label.hide()
        run_async(
            self,
            fetch_buildings,
            self._on_buildings_loaded,
            lambda error: self._show_error(error),
        )

    def _on_buildings_loaded(self, buildings: list[Building]):
        self.buildings = list(buildings)
        last_id = self.settings.get_last_building_id()
        self.building_combo.blockSignals(True)
        self.building_combo.clear()
        for building in self.buildings:
            self.building_combo.addItem(building.title, building.id)
        index = self.building_combo.findData(last_id) if last_id is not None else -1
        self.building_combo.setCurrentIndex(index if index >= 0 else 0)
        self.building_combo.blockSignals(False)
        logger.info(f"Loaded {len(self.buildings)} buildings")
        if self.buildings:
            self._on_building_selected(self.building_combo.currentIndex())
        else:
            self._clear_building()

    def _on_building_selected(self, index: int):
        if not 0 <= index < len(self.buildings):
            return
        self.building = self.buildings[index]
        self.settings.set_last_building_id(self.building.id)
        self.document_panel.set_building(self.building)
        self.fetch_residents()

    @Slot()
    def refresh(self):
        if not self.buildings:
            self.load_buildings()
        else:
            self.fetch_residents()

    def fetch_residents(self):
        """Fetch the selected building; only the newest request is applied."""
        if self.building is None:
            return
        self._request_token += 1
        token = self._request_token
        manager = ResidentManager(self.backend.store, self.backend.auth, self.building.id)
        self.error_label.hide()
        self.refresh_button.setEnabled(False)
        run_async(
            self,
            manager.load,
            lambda _residents: self._on_residents_loaded(token, manager),
            lambda error: self._on_fetch_failed(token, error),
        )

    def _on_residents_loaded(self, token: int, manager: ResidentManager):
        if token != self._request_token:
            logger.debug(f"Discarding stale fetch for building {manager.building_id}")
            return
        self.refresh_button.setEnabled(True)
        self.manager = manager
        self.resident_table.set_manager(manager)
        self.reorder_panel.set_residents(manager.residents)
        logger.info(f"Loaded {len(manager.residents)} residents for {self.building.title}")

    def _on_fetch_failed(self, token: int, error: BaseException):
        if token != self._request_token:
            return
        self.refresh_button.setEnabled(True)
        self._show_error(error)

    def _on_residents_changed(self, residents: list[Resident]):
        self.reorder_panel.set_residents(residents)

    def _clear_building(self):
        self.building = None
        self.manager = None
        self._request_token += 1
        self.resident_table.set_manager(None)
        self.reorder_panel.set_residents([])
        self.document_panel.set_building(None)

    def _show_error(self, error: BaseException):
        logger.error(f"Fetch failed: {error}")
        if isinstance(error, AuthenticationExpired):
            # The session listener asks for a new login
            return
        self.error_label.setText(messages.user_message(error, "fetch"))
        self.error_label.show()

    # ─────────────────────────────────────────────────────────────────────────
    # Settings
    # ─────────────────────────────────────────────────────────────────────────

    def set_locale(self, locale: str):
        self.locale = locale
        self.settings.set_locale(locale)
        for widget in (self.resident_table, self.reorder_panel, self.document_panel):
            widget.locale = locale
        if self.manager is not None:
            self.resident_table.show_residents(self.manager.residents)
            self.reorder_panel.set_residents(self.manager.residents)

    def _toggle_dark_mode(self, enabled: bool):
        self.settings.set_dark_mode(enabled)
        self._apply_theme(enabled)

    def _apply_theme(self, is_dark: bool):
        set_dark_mode(is_dark)
        app = QApplication.instance()
        if app is not None:
            app.setStyleSheet(get_stylesheet())
        self.console.update_theme()

    def _show_about(self):
        QMessageBox.about(
            self,
            "Um forritið",
            f"Mailbox Toolkit v{__version__}\n\n"
            "Íbúalistar og póstkassamerki fyrir fjölbýlishús.",
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Logging and shutdown
    # ─────────────────────────────────────────────────────────────────────────

    def _drain_log_queue(self):
        drain_queue(self.log_queue, self.console.append_log)

    def closeEvent(self, event):
        self.settings.set_window_geometry(bytes(self.saveGeometry()).hex())
        self.settings.set_splitter_state(bytes(self.splitter.saveState()).hex())
        self.log_timer.stop()
        wait_for_workers(self)
        detach_queue_handler(self._log_handler, "mailbox_toolkit")
        super().closeEvent(event)
