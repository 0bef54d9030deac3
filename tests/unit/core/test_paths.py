"""Unit tests for XDG path management."""

import os
from pathlib import Path
from unittest.mock import patch

from sweepctl.core.paths import APP_NAME, get_config_dir, get_manifest_path, get_theme_path


class TestGetConfigDir:
    """Tests for get_config_dir function."""

    def test_default_config_dir(self) -> None:
        """get_config_dir returns default path when XDG_CONFIG_HOME not set."""
        with patch.dict(os.environ):
            os.environ.pop("XDG_CONFIG_HOME", None)

            result = get_config_dir()

        assert result == Path.home() / ".config" / APP_NAME

    def test_respects_xdg_config_home(self, tmp_path: Path) -> None:
        """get_config_dir respects XDG_CONFIG_HOME environment variable."""
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
            result = get_config_dir()

        assert result == tmp_path / APP_NAME

    def test_empty_xdg_config_home_ignored(self) -> None:
        """An empty XDG_CONFIG_HOME falls back to the default."""
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": ""}):
            result = get_config_dir()

        assert result == Path.home() / ".config" / APP_NAME


class TestConveniencePaths:
    """Tests for convenience path functions."""

    def test_get_manifest_path(self, tmp_path: Path) -> None:
        """get_manifest_path returns manifest.toml in config dir."""
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
            result = get_manifest_path()

        assert result == tmp_path / "sweepctl" / "manifest.toml"

    def test_get_theme_path(self, tmp_path: Path) -> None:
        """get_theme_path returns theme.toml in config dir."""
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
            result = get_theme_path()

        assert result == tmp_path / "sweepctl" / "theme.toml"
