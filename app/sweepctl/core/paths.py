"""Locations of sweepctl's configuration files.

The manifest and the optional theme live together in the XDG config
directory, ``$XDG_CONFIG_HOME/sweepctl`` or ``~/.config/sweepctl``.
"""

import os
from pathlib import Path

# Directory name under the XDG config home
APP_NAME = "sweepctl"


def get_config_dir() -> Path:
    """Return the directory holding the manifest and theme.

    An unset or empty XDG_CONFIG_HOME falls back to ``~/.config``.
    """
    config_home = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(config_home) / APP_NAME


def get_manifest_path() -> Path:
    """Return the manifest used when no --manifest option is given."""
    return get_config_dir() / "manifest.toml"


def get_theme_path() -> Path:
    """Return the path of the user's colour overrides."""
    return get_config_dir() / "theme.toml"
