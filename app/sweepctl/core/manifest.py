"""Reading and writing manifest.toml.

The manifest is parsed with tomllib and validated against the Manifest
model, so malformed purge tables are rejected when the file is loaded.
Writes go through a temporary file in the target directory and replace
the manifest in one step; a crash never leaves a half-written manifest.
"""

import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

import tomli_w
from pydantic import ValidationError

from sweepctl.core.errors import SweepError
from sweepctl.core.paths import get_manifest_path
from sweepctl.models.manifest import Manifest


class ManifestError(SweepError):
    """Base exception for manifest I/O and validation errors."""


class ManifestNotFoundError(ManifestError):
    """Raised when there is no manifest at the given path."""


class ManifestParseError(ManifestError):
    """Raised when the manifest is not valid TOML."""


class ManifestValidationError(ManifestError):
    """Raised when the manifest does not match the schema."""


def load_manifest(path: Path | None = None) -> Manifest:
    """Load the manifest at path, or the default manifest.

    Raises:
        ManifestNotFoundError: If the file does not exist.
        ManifestParseError: If the file is not valid TOML.
        ManifestValidationError: If declarations or purge tables are invalid.
        ManifestError: If the file cannot be read.
    """
    manifest_path = path or get_manifest_path()
    if not manifest_path.exists():
        raise ManifestNotFoundError(f"Manifest not found: {manifest_path}")

    try:
        data = tomllib.loads(manifest_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ManifestParseError(f"Invalid TOML syntax: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(f"Failed to read manifest: {e}") from e

    try:
        return Manifest.model_validate(data)
    except ValidationError as e:
        raise ManifestValidationError(f"Invalid manifest content: {e}") from e


def save_manifest(manifest: Manifest, path: Path | None = None) -> Path:
    """Write the manifest atomically, creating parent directories.

    Returns:
        The path written to.

    Raises:
        ManifestError: If the file cannot be written.
    """
    manifest_path = path or get_manifest_path()
    data = _manifest_to_dict(manifest)

    tmp_path: Path | None = None
    try:
        manifest_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb", dir=manifest_path.parent, prefix=".manifest-", suffix=".tmp", delete=False
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(tmp_path, manifest_path)
    except OSError as e:
        if tmp_path is not None:
            tmp_path.unlink(missing_ok=True)
        raise ManifestError(f"Failed to write manifest: {e}") from e

    return manifest_path


def manifest_exists(path: Path | None = None) -> bool:
    """Check whether a manifest exists at path, or at the default location."""
    return (path or get_manifest_path()).exists()


def _manifest_to_dict(manifest: Manifest) -> dict[str, Any]:
    # TOML has no null; unset optional fields are left out
    return manifest.model_dump(mode="python", exclude_none=True)
