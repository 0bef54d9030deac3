"""Unit tests for manifest I/O operations.

Tests for loading and saving manifest files.
"""

import tomllib
from datetime import UTC, datetime
from pathlib import Path

import pytest

from sweepctl.core.errors import SweepError
from sweepctl.core.manifest import (
    ManifestError,
    ManifestNotFoundError,
    ManifestParseError,
    ManifestValidationError,
    load_manifest,
    manifest_exists,
    save_manifest,
)
from sweepctl.models.manifest import Manifest, ManifestMeta, SystemConfig


class TestSaveManifest:
    """Tests for save_manifest function."""

    def test_save_creates_file(self, tmp_path: Path, sample_manifest: Manifest) -> None:
        """save_manifest creates a TOML file."""
        manifest_path = tmp_path / "manifest.toml"

        result = save_manifest(sample_manifest, manifest_path)

        assert result == manifest_path
        assert manifest_path.exists()

    def test_save_creates_parent_directories(
        self, tmp_path: Path, sample_manifest: Manifest
    ) -> None:
        """save_manifest creates parent directories if needed."""
        manifest_path = tmp_path / "nested" / "dir" / "manifest.toml"

        save_manifest(sample_manifest, manifest_path)

        assert manifest_path.exists()

    def test_save_leaves_no_temp_files(self, tmp_path: Path, sample_manifest: Manifest) -> None:
        """The atomic write cleans up after itself."""
        save_manifest(sample_manifest, tmp_path / "manifest.toml")

        assert [p.name for p in tmp_path.iterdir()] == ["manifest.toml"]

    def test_save_writes_purge_tables(self, tmp_path: Path, sample_manifest: Manifest) -> None:
        """Purge settings are written per kind without null values."""
        manifest_path = tmp_path / "manifest.toml"
        save_manifest(sample_manifest, manifest_path)

        with open(manifest_path, "rb") as f:
            data = tomllib.load(f)

        assert data["purge"]["user"] == {"purge": True, "system_threshold": 999, "noop": False}
        assert data["purge"]["group"]["exclude_ids"] == "1500"
        assert "only_ids" not in data["purge"]["group"]
        assert data["users"]["alice"] == {"reason": "Primary login"}
        assert data["groups"]["docker"] == {}


class TestLoadManifest:
    """Tests for load_manifest function."""

    def test_load_valid_manifest(self, tmp_path: Path, sample_manifest: Manifest) -> None:
        """load_manifest loads a valid manifest file."""
        manifest_path = tmp_path / "manifest.toml"
        save_manifest(sample_manifest, manifest_path)

        loaded = load_manifest(manifest_path)

        assert loaded.system.name == "test-machine"
        assert set(loaded.users) == {"alice"}
        assert set(loaded.groups) == {"alice", "docker"}
        assert loaded.purge.user is not None
        assert loaded.purge.user.system_threshold == 999

    def test_load_handwritten_manifest(self, tmp_path: Path) -> None:
        """Mixed id arrays and boolean thresholds load as written."""
        manifest_path = tmp_path / "manifest.toml"
        manifest_path.write_text(
            """\
[meta]
created = 2026-01-01T00:00:00Z
updated = 2026-01-01T00:00:00Z

[system]
name = "workstation"

[users.alice]

[purge.user]
purge = true
system_threshold = true

[purge.group]
purge = true
only_ids = [3000, "3100..3199"]
system_threshold = false
noop = true
"""
        )

        loaded = load_manifest(manifest_path)

        assert loaded.purge.user is not None
        assert loaded.purge.user.system_threshold is True
        assert loaded.purge.group is not None
        assert loaded.purge.group.only_ids == [3000, "3100..3199"]
        assert loaded.purge.group.noop is True
        assert loaded.groups == {}

    def test_load_raises_on_missing_file(self, tmp_path: Path) -> None:
        """load_manifest raises ManifestNotFoundError for missing file."""
        with pytest.raises(ManifestNotFoundError):
            load_manifest(tmp_path / "nonexistent.toml")

    def test_load_raises_on_invalid_toml(self, tmp_path: Path) -> None:
        """load_manifest raises ManifestParseError for invalid TOML."""
        manifest_path = tmp_path / "invalid.toml"
        manifest_path.write_text("invalid [ toml content")

        with pytest.raises(ManifestParseError):
            load_manifest(manifest_path)

    def test_load_raises_on_invalid_schema(self, tmp_path: Path) -> None:
        """load_manifest raises ManifestValidationError for invalid schema."""
        manifest_path = tmp_path / "invalid_schema.toml"
        manifest_path.write_text('[meta]\nversion = "1.0"\n')  # Missing required fields

        with pytest.raises(ManifestValidationError):
            load_manifest(manifest_path)

    def test_load_rejects_unknown_purge_keys(self, tmp_path: Path) -> None:
        """Typos in purge tables are rejected rather than ignored."""
        manifest_path = tmp_path / "typo.toml"
        manifest_path.write_text(
            """\
[meta]
created = 2026-01-01T00:00:00Z
updated = 2026-01-01T00:00:00Z

[system]
name = "workstation"

[purge.user]
purge = true
exclude_id = "1000"
"""
        )

        with pytest.raises(ManifestValidationError):
            load_manifest(manifest_path)

    @pytest.mark.parametrize(
        "line",
        ["exclude_ids = true", "only_ids = [2000.0]", "system_threshold = 1.5"],
    )
    def test_load_rejects_non_integer_ids(self, tmp_path: Path, line: str) -> None:
        """TOML booleans and floats in purge tables are rejected, not coerced."""
        manifest_path = tmp_path / "coerce.toml"
        manifest_path.write_text(
            f"""\
[meta]
created = 2026-01-01T00:00:00Z
updated = 2026-01-01T00:00:00Z

[system]
name = "workstation"

[purge.user]
purge = true
{line}
"""
        )

        with pytest.raises(ManifestValidationError):
            load_manifest(manifest_path)


class TestManifestExists:
    """Tests for manifest_exists function."""

    def test_returns_true_for_existing_file(
        self, tmp_path: Path, sample_manifest: Manifest
    ) -> None:
        """manifest_exists returns True when file exists."""
        manifest_path = tmp_path / "manifest.toml"
        save_manifest(sample_manifest, manifest_path)

        assert manifest_exists(manifest_path) is True

    def test_returns_false_for_missing_file(self, tmp_path: Path) -> None:
        """manifest_exists returns False when file doesn't exist."""
        assert manifest_exists(tmp_path / "nonexistent.toml") is False


class TestManifestRoundTrip:
    """Integration tests for save/load round-trip."""

    def test_preserves_timestamps(self, tmp_path: Path) -> None:
        """Round-trip preserves datetime values."""
        created = datetime(2026, 1, 15, 10, 30, 0, tzinfo=UTC)
        updated = datetime(2026, 1, 20, 14, 45, 0, tzinfo=UTC)

        manifest = Manifest(
            meta=ManifestMeta(version="1.0", created=created, updated=updated),
            system=SystemConfig(name="test"),
        )

        manifest_path = tmp_path / "manifest.toml"
        save_manifest(manifest, manifest_path)
        loaded = load_manifest(manifest_path)

        assert loaded.meta.created == created
        assert loaded.meta.updated == updated
        assert loaded.purge.user is None
        assert loaded.purge.group is None


class TestManifestErrors:
    """Tests for the manifest exception hierarchy."""

    def test_part_of_sweep_errors(self) -> None:
        """Manifest errors share the sweepctl base exception."""
        assert issubclass(ManifestError, SweepError)
        assert issubclass(ManifestValidationError, ManifestError)

    def test_write_failure(self, tmp_path: Path, sample_manifest: Manifest) -> None:
        """Writing into a path below a regular file raises ManifestError."""
        blocker = tmp_path / "file"
        blocker.write_text("")

        with pytest.raises(ManifestError, match="Failed to write"):
            save_manifest(sample_manifest, blocker / "manifest.toml")
