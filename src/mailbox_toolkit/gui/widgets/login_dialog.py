"""
Login dialog.

Signs the administrator in through the configured AuthProvider. The dialog
stays open on rejected credentials or backend errors and shows the reason
inline.
"""
import logging
from typing import Optional

from PySide6.QtCore import Qt, Slot
from PySide6.QtWidgets import (
    QDialog,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
)

from mailbox_toolkit import messages
from mailbox_toolkit.auth import AuthProvider, User
from mailbox_toolkit.gui.styles.theme import get_styles
from mailbox_toolkit.gui.worker import run_async

logger = logging.getLogger(__name__)


class LoginDialog(QDialog):
    def __init__(
        self,
        auth: AuthProvider,
        email: Optional[str] = None,
        notice: Optional[str] = None,
        parent=None,
    ):
        super().__init__(parent)
        self.auth = auth
        self.user: Optional[User] = None

        self.setWindowTitle("Innskráning")
        self.setModal(True)
        self.setMinimumWidth(360)

        layout = QVBoxLayout(self)

        self.notice_label = QLabel(notice or "")
        self.notice_label.setObjectName("statusMessage")
        self.notice_label.setWordWrap(True)
        self.notice_label.setVisible(bool(notice))
        layout.addWidget(self.notice_label)

        form = QFormLayout()
        self.email_edit = QLineEdit(email or "")
        self.email_edit.setPlaceholderText("netfang@daemi.is")
        self.password_edit = QLineEdit()
        self.password_edit.setEchoMode(QLineEdit.EchoMode.Password)
        form.addRow("Netfang", self.email_edit)
        form.addRow("Lykilorð", self.password_edit)
        layout.addLayout(form)

        self.error_label = QLabel()
        self.error_label.setObjectName("errorBanner")
        self.error_label.setWordWrap(True)
        self.error_label.hide()
        layout.addWidget(self.error_label)

        buttons = QHBoxLayout()
        buttons.addStretch()
        self.cancel_button = QPushButton("Hætta við")
        self.cancel_button.setStyleSheet(get_styles().BUTTON_SECONDARY)
        self.cancel_button.clicked.connect(self.reject)
        self.login_button = QPushButton("Skrá inn")
        self.login_button.setStyleSheet(get_styles().BUTTON_PRIMARY)
        self.login_button.setDefault(True)
        self.login_button.clicked.connect(self.submit)
        buttons.addWidget(self.cancel_button)
        buttons.addWidget(self.login_button)
        layout.addLayout(buttons)

        if email:
            self.password_edit.setFocus(Qt.FocusReason.OtherFocusReason)

    @property
    def email(self) -> str:
        return self.email_edit.text().strip()

    @Slot()
    def submit(self):
        email = self.email
        password = self.password_edit.text()
        if not email or not password:
            self.show_error(messages.LOGIN_FAILED)
            return

        self._set_busy(True)
        run_async(
            self,
            lambda: self.auth.login(email, password),
            self._on_login_finished,
            self._on_login_failed,
        )

    def show_error(self, text: str) -> None:
        self.error_label.setText(text)
        self.error_label.show()

    def _set_busy(self, busy: bool) -> None:
        self.login_button.setEnabled(not busy)
        self.email_edit.setEnabled(not busy)
        self.password_edit.setEnabled(not busy)

    def _on_login_finished(self, user: Optional[User]):
        self._set_busy(False)
        if user is None:
            self.password_edit.clear()
            self.show_error(messages.LOGIN_FAILED)
            return
        self.user = user
        self.accept()

    def _on_login_failed(self, error: BaseException):
        self._set_busy(False)
        logger.error(f"Login failed: {error}")
        self.show_error(messages.user_message(error))
