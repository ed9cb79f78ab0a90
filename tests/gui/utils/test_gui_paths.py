"""Unit tests for application paths."""

import sys
from pathlib import Path

from mailbox_toolkit.gui.utils import paths


class TestPaths:
    """Tests for development and frozen path selection."""

    def test_not_frozen_in_tests(self):
        assert not paths.is_frozen()

    def test_dev_paths_under_workspace(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert paths.get_app_data_dir() == tmp_path / "workspace"
        assert paths.get_output_dir() == tmp_path / "workspace" / "output"
        assert paths.get_settings_path() == tmp_path / "workspace" / "gui_settings.json"

    def test_frozen_output_in_documents(self, monkeypatch):
        monkeypatch.setattr(sys, "frozen", True, raising=False)
        assert paths.is_frozen()
        output = paths.get_output_dir()
        assert output.name == paths.APP_NAME
        assert isinstance(output, Path)
