"""Unit tests for purge command."""

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from sweepctl.cli.main import app
from sweepctl.core.manifest import save_manifest
from sweepctl.models.manifest import DeclaredEntry, Manifest, PurgeConfig, PurgeSettings
from sweepctl.utils.shell import CommandResult

runner = CliRunner()


@pytest.fixture
def mock_shadow() -> Iterator[MagicMock]:
    """Patch userdel/groupdel execution."""
    with (
        patch("sweepctl.operators.shadow.command_exists", return_value=True),
        patch("sweepctl.operators.shadow.run_command") as mock_run,
    ):
        mock_run.return_value = CommandResult(stdout="", stderr="", returncode=0)
        yield mock_run


def _removed(mock_run: MagicMock) -> list[list[str]]:
    return [c.args[0] for c in mock_run.call_args_list]


class TestPurgeCommand:
    """Tests for sweepctl purge command."""

    def test_purge_help(self) -> None:
        """Purge command shows help."""
        result = runner.invoke(app, ["purge", "--help"])
        assert result.exit_code == 0
        assert "--dry-run" in result.stdout

    def test_purge_yes(
        self, manifest_file: Path, mock_getent: MagicMock, mock_shadow: MagicMock
    ) -> None:
        """--yes removes every planned entity without asking."""
        result = runner.invoke(app, ["purge", "--manifest", str(manifest_file), "--yes"])

        assert result.exit_code == 0
        assert sorted(_removed(mock_shadow)) == [
            ["sudo", "groupdel", "projects"],
            ["sudo", "userdel", "bob"],
            ["sudo", "userdel", "contractor"],
        ]
        assert "Removed user 'bob' (uid 1001)" in result.stdout
        assert "3 action(s) completed." in result.stdout

    def test_purge_dry_run(
        self, manifest_file: Path, mock_getent: MagicMock, mock_shadow: MagicMock
    ) -> None:
        """--dry-run reports removals without running anything."""
        result = runner.invoke(app, ["purge", "--manifest", str(manifest_file), "--dry-run"])

        assert result.exit_code == 0
        assert "Planned Purges (Dry Run)" in result.stdout
        assert "Would remove group 'projects' (gid 3001)" in result.stdout
        mock_shadow.assert_not_called()

    def test_purge_confirmation_declined(
        self, manifest_file: Path, mock_getent: MagicMock, mock_shadow: MagicMock
    ) -> None:
        """Declining the prompt removes nothing."""
        result = runner.invoke(app, ["purge", "--manifest", str(manifest_file)], input="n\n")

        assert result.exit_code == 0
        assert "Remove 3 entities?" in result.stdout
        assert "Aborted." in result.stdout
        mock_shadow.assert_not_called()

    def test_purge_confirmation_accepted(
        self, manifest_file: Path, mock_getent: MagicMock, mock_shadow: MagicMock
    ) -> None:
        """Accepting the prompt applies the plan."""
        result = runner.invoke(app, ["purge", "--manifest", str(manifest_file)], input="y\n")

        assert result.exit_code == 0
        assert len(_removed(mock_shadow)) == 3

    def test_purge_partial_failure(
        self, manifest_file: Path, mock_getent: MagicMock, mock_shadow: MagicMock
    ) -> None:
        """A failed removal is reported, the rest still run, and the exit code is 1."""

        def fail_bob(args: list[str], **kwargs: object) -> CommandResult:
            if args[-1] == "bob":
                return CommandResult(
                    stdout="", stderr="userdel: user bob is logged in", returncode=8
                )
            return CommandResult(stdout="", stderr="", returncode=0)

        mock_shadow.side_effect = fail_bob

        result = runner.invoke(app, ["purge", "--manifest", str(manifest_file), "--yes"])

        assert result.exit_code == 1
        assert len(_removed(mock_shadow)) == 3
        assert "Failed to remove user 'bob'" in result.output
        assert "2 succeeded, 1 failed." in result.output

    def test_purge_noop_kind(
        self,
        tmp_path: Path,
        sample_manifest: Manifest,
        mock_getent: MagicMock,
        mock_shadow: MagicMock,
    ) -> None:
        """Noop actions are shown but never executed."""
        manifest = sample_manifest.model_copy(
            update={
                "purge": PurgeConfig(
                    user=PurgeSettings(purge=True, system_threshold=999),
                    group=PurgeSettings(purge=True, exclude_ids="1500", noop=True),
                )
            }
        )
        path = save_manifest(manifest, tmp_path / "manifest.toml")

        result = runner.invoke(app, ["purge", "--manifest", str(path), "--yes"])

        assert result.exit_code == 0
        assert ["sudo", "groupdel", "projects"] not in _removed(mock_shadow)
        assert "noop: group 'projects' (gid 3001) not removed" in result.stdout

    def test_purge_nothing_to_do(
        self,
        tmp_path: Path,
        sample_manifest: Manifest,
        mock_getent: MagicMock,
        mock_shadow: MagicMock,
    ) -> None:
        """Nothing is removed when every candidate is kept or declared."""
        manifest = sample_manifest.model_copy(
            update={
                "users": {
                    **sample_manifest.users,
                    "bob": DeclaredEntry(),
                    "contractor": DeclaredEntry(),
                }
            }
        )
        path = save_manifest(manifest, tmp_path / "manifest.toml")

        result = runner.invoke(app, ["purge", "--manifest", str(path), "--kind", "user"])

        assert result.exit_code == 0
        assert "Nothing to purge." in result.stdout
        mock_shadow.assert_not_called()

    def test_purge_tool_missing(
        self, manifest_file: Path, mock_getent: MagicMock
    ) -> None:
        """A missing userdel fails the user actions only."""
        with (
            patch(
                "sweepctl.operators.shadow.command_exists",
                side_effect=lambda name: name != "userdel",
            ),
            patch(
                "sweepctl.operators.shadow.run_command",
                return_value=CommandResult(stdout="", stderr="", returncode=0),
            ) as mock_run,
        ):
            result = runner.invoke(app, ["purge", "--manifest", str(manifest_file), "--yes"])

        assert result.exit_code == 1
        assert _removed(mock_run) == [["sudo", "groupdel", "projects"]]
        assert "userdel is not available" in result.output
