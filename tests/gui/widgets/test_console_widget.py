"""Unit tests for the log console."""

import pytest

from mailbox_toolkit.gui.widgets.console_widget import ConsoleWidget


@pytest.fixture
def console(qtbot):
    widget = ConsoleWidget()
    qtbot.addWidget(widget)
    return widget


class TestConsoleWidget:
    """Tests for ConsoleWidget."""

    def test_append_formats_level(self, console):
        console.append_log("warning", "Apartment '101' has no residents")
        text = console.plain_text()
        assert "[WARNING] Apartment '101' has no residents" in text

    def test_suppressed_levels(self, console):
        console.suppressed_levels = {"info"}
        console.append_log("INFO", "hidden")
        console.append_log("ERROR", "shown")
        text = console.plain_text()
        assert "hidden" not in text
        assert "shown" in text

    def test_clear(self, console):
        console.append_log("INFO", "line")
        console.clear()
        assert console.plain_text() == ""

    def test_theme_update_keeps_text(self, console):
        console.append_log("INFO", "line")
        console.update_theme()
        assert "line" in console.plain_text()
