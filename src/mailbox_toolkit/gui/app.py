"""
Entry point for the PySide6 GUI.

    mailbox-toolkit-gui [--offline-demo] [--config FILE]
"""
import argparse
import logging
import sys
from pathlib import Path


def _parse_args(argv):
    parser = argparse.ArgumentParser(prog="mailbox-toolkit-gui")
    parser.add_argument("--config", type=Path, help="JSON config file")
    parser.add_argument(
        "--offline-demo",
        action="store_true",
        help="Use built-in sample residents instead of the configured source",
    )
    # Qt consumes its own options (-style, -platform, ...)
    args, _unknown = parser.parse_known_args(argv)
    return args


def run():
    """
    Main entry point for the GUI application.
    """
    from PySide6.QtCore import QTimer
    from PySide6.QtWidgets import QApplication, QMessageBox

    from mailbox_toolkit.backend import create_backend
    from mailbox_toolkit.config import ConfigError, load_config
    from mailbox_toolkit.gui.main_window import MainWindow
    from mailbox_toolkit.gui.models.settings import SettingsStore
    from mailbox_toolkit.gui.styles.theme import get_stylesheet, set_dark_mode
    from mailbox_toolkit.gui.utils.paths import get_settings_path

    args = _parse_args(sys.argv[1:])
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QApplication(sys.argv)
    app.setApplicationName("Mailbox Toolkit")
    app.setApplicationDisplayName("Mailbox Toolkit")
    app.setOrganizationName("Mailbox Toolkit")

    settings = SettingsStore(get_settings_path())

    # Check for malformed settings and prompt user to reset if needed
    if not settings.check_load_error():
        sys.exit(1)

    set_dark_mode(settings.get_dark_mode())
    app.setStyleSheet(get_stylesheet())

    try:
        config = load_config(args.config)
        backend = create_backend(config, offline_demo=args.offline_demo)
    except ConfigError as e:
        QMessageBox.critical(None, "Villa í stillingum", str(e))
        sys.exit(2)

    window = MainWindow(backend, config, settings)
    window.show()

    def start():
        if not window.start():
            window.close()

    QTimer.singleShot(0, start)
    sys.exit(app.exec())


if __name__ == "__main__":
    run()
