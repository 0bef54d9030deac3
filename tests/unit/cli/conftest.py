"""Fixtures shared by the CLI command tests."""

from collections.abc import Callable, Iterator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from sweepctl.core.manifest import save_manifest
from sweepctl.models.manifest import Manifest
from sweepctl.utils.shell import CommandResult


@pytest.fixture
def manifest_file(tmp_path: Path, sample_manifest: Manifest) -> Path:
    """Sample manifest saved to a temporary file."""
    return save_manifest(sample_manifest, tmp_path / "manifest.toml")


@pytest.fixture
def fake_getent(
    mock_passwd_output: str, mock_group_output: str
) -> Callable[..., CommandResult]:
    """run_command replacement answering getent passwd/group queries."""
    outputs = {"passwd": mock_passwd_output, "group": mock_group_output}

    def _run(args: list[str], **kwargs: object) -> CommandResult:
        return CommandResult(stdout=outputs[args[1]], stderr="", returncode=0)

    return _run


@pytest.fixture
def mock_getent(fake_getent: Callable[..., CommandResult]) -> Iterator[MagicMock]:
    """Patch the scanners to read the sample getent output."""
    with (
        patch("sweepctl.scanners.getent.command_exists", return_value=True),
        patch("sweepctl.scanners.getent.run_command", side_effect=fake_getent) as mock_run,
    ):
        yield mock_run
