"""
Settings persistence model for the GUI.

Handles all persistent GUI state with robust error handling. Any malformed
data results in a fallback to defaults, never a crash.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from PySide6.QtCore import QObject, Signal

logger = logging.getLogger(__name__)


class SettingsStore(QObject):
    """Lightweight JSON-backed store for persisting GUI preferences."""

    outputDirChanged = Signal(str)
    CURRENT_VERSION = 1

    def __init__(self, path: Path) -> None:
        super().__init__()
        self.path = path
        self.data: Dict[str, object] = {}
        self._load_error: Optional[str] = None

        if self.path.exists():
            try:
                self.data = json.loads(self.path.read_text(encoding="utf-8"))
            except json.JSONDecodeError as e:
                self._load_error = f"Settings file is corrupted:\n{e}"
                self.data = {}
            except OSError as e:
                self._load_error = f"Failed to read settings:\n{e}"
                self.data = {}

        if "version" not in self._get_dict():
            self.data["version"] = self.CURRENT_VERSION

    @property
    def load_error(self) -> Optional[str]:
        return self._load_error

    def check_load_error(self) -> bool:
        """
        Check if there was an error loading settings and prompt user to reset.

        Returns True if app should continue, False if app should exit.
        Call this after QApplication is created.
        """
        if not self._load_error:
            return True

        from PySide6.QtWidgets import QMessageBox

        msg = QMessageBox()
        msg.setIcon(QMessageBox.Icon.Warning)
        msg.setWindowTitle("Villa í stillingum")
        msg.setText("Ekki tókst að lesa stillingaskrána.")
        msg.setInformativeText(
            f"{self._load_error}\n\n"
            "Viltu endurstilla og halda áfram?"
        )
        msg.setStandardButtons(
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No
        )
        msg.setDefaultButton(QMessageBox.StandardButton.Yes)

        if msg.exec() == QMessageBox.StandardButton.Yes:
            self.reset()
            return True
        return False

    def reset(self) -> None:
        """Drop every preference and write an empty settings file."""
        self.data = {"version": self.CURRENT_VERSION}
        self._load_error = None
        self._save()

    # ─────────────────────────────────────────────────────────────────────────
    # Building and documents
    # ─────────────────────────────────────────────────────────────────────────

    def get_last_building_id(self) -> Optional[int]:
        value = self._get_dict().get("last_building_id")
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        return None

    def set_last_building_id(self, building_id: Optional[int]) -> None:
        self._get_dict()["last_building_id"] = building_id
        self._save()

    def get_output_dir(self) -> Optional[str]:
        value = self._get_dict().get("output_dir")
        return value if isinstance(value, str) and value else None

    def set_output_dir(self, value: str) -> None:
        self._get_dict()["output_dir"] = value
        self._save()
        self.outputDirChanged.emit(value)

    def get_labels_per_page(self, default: int = 6) -> int:
        return self._safe_int(self._get_dict().get("labels_per_page"), default, minimum=1)

    def set_labels_per_page(self, value: int) -> None:
        self._get_dict()["labels_per_page"] = int(value)
        self._save()

    def get_locale(self) -> Optional[str]:
        value = self._get_dict().get("locale")
        return value if isinstance(value, str) and value else None

    def set_locale(self, value: str) -> None:
        self._get_dict()["locale"] = value
        self._save()

    def get_show_footer(self) -> bool:
        """Whether PDFs carry the page number footer. Defaults to True."""
        return bool(self._get_dict().get("show_footer", True))

    def set_show_footer(self, enabled: bool) -> None:
        self._get_dict()["show_footer"] = bool(enabled)
        self._save()

    def get_last_email(self) -> Optional[str]:
        value = self._get_dict().get("last_email")
        return value if isinstance(value, str) and value else None

    def set_last_email(self, email: str) -> None:
        self._get_dict()["last_email"] = email
        self._save()

    # ─────────────────────────────────────────────────────────────────────────
    # Window state
    # ─────────────────────────────────────────────────────────────────────────

    def get_main_tab(self) -> Optional[int]:
        value = self._get_dict().get("main_tab")
        if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
            return value
        return None

    def set_main_tab(self, tab_index: int) -> None:
        self._get_dict()["main_tab"] = tab_index
        self._save()

    def get_window_geometry(self) -> Optional[str]:
        return self._get_hex("window_geometry")

    def set_window_geometry(self, geometry: str) -> None:
        self._get_dict()["window_geometry"] = geometry
        self._save()

    def get_splitter_state(self) -> Optional[str]:
        return self._get_hex("splitter_state")

    def set_splitter_state(self, state: str) -> None:
        self._get_dict()["splitter_state"] = state
        self._save()

    def get_dark_mode(self) -> bool:
        return bool(self._get_dict().get("dark_mode", False))

    def set_dark_mode(self, enabled: bool) -> None:
        self._get_dict()["dark_mode"] = bool(enabled)
        self._save()

    # ─────────────────────────────────────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────────────────────────────────────

    def _safe_int(self, value: Any, default: int, minimum: int = 0) -> int:
        if isinstance(value, bool):
            return default
        try:
            number = int(value)
        except (TypeError, ValueError):
            return default
        return number if number >= minimum else default

    def _get_hex(self, key: str) -> Optional[str]:
        """Saved Qt state blobs are hex strings; anything else is discarded."""
        value = self._get_dict().get(key)
        if not isinstance(value, str) or not value:
            return None
        try:
            bytes.fromhex(value)
        except ValueError:
            logger.warning(f"Ignoring malformed {key} in settings")
            return None
        return value

    def _get_dict(self) -> Dict[str, object]:
        if not isinstance(self.data, dict):
            self.data = {}
        return self.data

    def _save(self) -> None:
        """Safely write settings with atomic replacement.

        Uses a temp file to prevent corruption if write is interrupted.
        """
        temp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)

            temp_path = self.path.with_suffix('.tmp')
            temp_path.write_text(json.dumps(self.data, indent=2), encoding="utf-8")

            # Atomic rename (overwrites existing)
            temp_path.replace(self.path)
        except (OSError, TypeError, ValueError) as e:
            logger.warning(f"Failed to save settings: {e}")
            if temp_path is not None:
                try:
                    temp_path.unlink(missing_ok=True)
                except OSError:
                    pass
