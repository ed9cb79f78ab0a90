"""
Document panel.

Pick a document type and generate it for the selected building. Failures
are shown inline with a retry button that repeats the last request.
"""
import logging
from pathlib import Path
from typing import Optional

from PySide6.QtCore import QUrl, Signal, Slot
from PySide6.QtGui import QDesktopServices
from PySide6.QtWidgets import (
    QComboBox,
    QFileDialog,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from mailbox_toolkit import messages
from mailbox_toolkit.auth import AuthProvider
from mailbox_toolkit.controller import GenerateRequest, generate_all, generate_document
from mailbox_toolkit.core.models import Building
from mailbox_toolkit.documents import DocumentType
from mailbox_toolkit.gui.models.settings import SettingsStore
from mailbox_toolkit.gui.styles.theme import get_styles
from mailbox_toolkit.gui.utils.icons import MaterialIcons
from mailbox_toolkit.gui.utils.paths import get_output_dir
from mailbox_toolkit.gui.worker import run_async
from mailbox_toolkit.ordering import DEFAULT_LOCALE
from mailbox_toolkit.store import RecordStore

logger = logging.getLogger(__name__)

ALL_DOCUMENTS = "all"

DOCUMENT_CHOICES = [
    (DocumentType.RESIDENT_DIRECTORY.display_title, DocumentType.RESIDENT_DIRECTORY.value),
    (DocumentType.MAILBOX_LABELS.display_title, DocumentType.MAILBOX_LABELS.value),
    ("Bæði skjöl", ALL_DOCUMENTS),
]


class DocumentPanel(QWidget):
    generated = Signal(list)

    def __init__(
        self,
        store: RecordStore,
        auth: AuthProvider,
        settings: SettingsStore,
        parent=None,
    ):
        super().__init__(parent)
        self.store = store
        self.auth = auth
        self.settings = settings
        self.locale = DEFAULT_LOCALE
        self.building: Optional[Building] = None
        self._last_request: Optional[tuple[GenerateRequest, bool]] = None
        self._last_paths: list[Path] = []
        self._busy = False

        layout = QVBoxLayout(self)
        form = QFormLayout()

        self.type_combo = QComboBox()
        for label, value in DOCUMENT_CHOICES:
            self.type_combo.addItem(label, value)
        # Connected after the items exist
        self.type_combo.currentIndexChanged.connect(lambda _i: self._update_controls())
        form.addRow("Skjal", self.type_combo)

        self.labels_spin = QSpinBox()
        self.labels_spin.setRange(1, 40)
        self.labels_spin.setValue(settings.get_labels_per_page())
        self.labels_spin.valueChanged.connect(settings.set_labels_per_page)
        form.addRow("Merki á síðu", self.labels_spin)

        output_row = QHBoxLayout()
        self.output_edit = QLineEdit(settings.get_output_dir() or str(get_output_dir()))
        self.output_edit.editingFinished.connect(
            lambda: settings.set_output_dir(self.output_edit.text().strip())
        )
        browse = QPushButton(MaterialIcons.folder_open(), "")
        browse.setToolTip("Velja möppu")
        browse.clicked.connect(self._browse_output)
        output_row.addWidget(self.output_edit)
        output_row.addWidget(browse)
        form.addRow("Mappa", output_row)
        layout.addLayout(form)

        self.error_label = QLabel()
        self.error_label.setObjectName("errorBanner")
        self.error_label.setWordWrap(True)
        self.error_label.hide()
        layout.addWidget(self.error_label)

        self.status_label = QLabel()
        self.status_label.setObjectName("statusMessage")
        self.status_label.setWordWrap(True)
        layout.addWidget(self.status_label)

        buttons = QHBoxLayout()
        self.open_button = QPushButton(MaterialIcons.folder_open(), "Opna möppu")
        self.open_button.setStyleSheet(get_styles().BUTTON_SECONDARY)
        self.open_button.clicked.connect(self._open_folder)
        self.open_button.hide()
        self.retry_button = QPushButton(MaterialIcons.refresh(), "Reyna aftur")
        self.retry_button.setStyleSheet(get_styles().BUTTON_SECONDARY)
        self.retry_button.clicked.connect(self.retry)
        self.retry_button.hide()
        self.generate_button = QPushButton(MaterialIcons.file_pdf(), "Búa til PDF")
        self.generate_button.setStyleSheet(get_styles().BUTTON_PRIMARY)
        self.generate_button.clicked.connect(self.generate)
        buttons.addWidget(self.open_button)
        buttons.addStretch()
        buttons.addWidget(self.retry_button)
        buttons.addWidget(self.generate_button)
        layout.addLayout(buttons)
        layout.addStretch()

        self._update_controls()

    # ─────────────────────────────────────────────────────────────────────────
    # State
    # ─────────────────────────────────────────────────────────────────────────

    def set_building(self, building: Optional[Building]) -> None:
        self.building = building
        self._last_request = None
        self.error_label.hide()
        self.retry_button.hide()
        self.status_label.clear()
        self._update_controls()

    def selected_type(self) -> str:
        return self.type_combo.currentData()

    def build_request(self) -> tuple[GenerateRequest, bool]:
        """Request for the current form values, and whether to produce both documents."""
        choice = self.selected_type()
        generate_both = choice == ALL_DOCUMENTS
        doc_type = DocumentType.MAILBOX_LABELS if generate_both else DocumentType(choice)
        output_dir = Path(self.output_edit.text().strip() or get_output_dir()).expanduser()
        request = GenerateRequest(
            building_id=self.building.id,
            doc_type=doc_type,
            output_dir=output_dir,
            labels_per_page=self.labels_spin.value(),
            locale=self.locale,
            show_footer=self.settings.get_show_footer(),
            building=self.building,
        )
        return request, generate_both

    # ─────────────────────────────────────────────────────────────────────────
    # Actions
    # ─────────────────────────────────────────────────────────────────────────

    @Slot()
    def generate(self):
        if self.building is None or self._busy:
            return
        self._start(*self.build_request())

    @Slot()
    def retry(self):
        if self._last_request is None or self._busy:
            return
        self._start(*self._last_request)

    def _start(self, request: GenerateRequest, generate_both: bool) -> None:
        self._last_request = (request, generate_both)
        self._set_busy(True)
        self.error_label.hide()
        self.retry_button.hide()
        self.status_label.setText("Bý til skjal...")

        if generate_both:
            factory = lambda: generate_all(request, store=self.store, auth=self.auth)
        else:
            factory = lambda: generate_document(request, store=self.store, auth=self.auth)
        run_async(self, factory, self._on_generated, self._on_failed)

    def _on_generated(self, result):
        self._set_busy(False)
        results = result if isinstance(result, list) else [result]
        self._last_paths = [r.path for r in results]
        lines = [f"{r.path.name} ({r.page_count} bls.)" for r in results]
        for r in results:
            lines.extend(r.warnings)
        self.status_label.setText("\n".join(lines))
        self.open_button.show()
        self.generated.emit(results)

    def _on_failed(self, error: BaseException):
        self._set_busy(False)
        logger.error(f"Document generation failed: {error}")
        self.status_label.clear()
        self.error_label.setText(messages.user_message(error))
        self.error_label.show()
        self.retry_button.show()

    def _browse_output(self):
        folder = QFileDialog.getExistingDirectory(self, "Velja möppu", self.output_edit.text())
        if folder:
            self.output_edit.setText(folder)
            self.settings.set_output_dir(folder)

    def _open_folder(self):
        if self._last_paths:
            QDesktopServices.openUrl(QUrl.fromLocalFile(str(self._last_paths[0].parent)))

    def _set_busy(self, busy: bool) -> None:
        self._busy = busy
        self._update_controls()

    def _update_controls(self):
        self.generate_button.setEnabled(self.building is not None and not self._busy)
        self.retry_button.setEnabled(not self._busy)
        self.labels_spin.setEnabled(self.selected_type() != DocumentType.RESIDENT_DIRECTORY.value)
