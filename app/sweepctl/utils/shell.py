"""Running the system tools sweepctl relies on.

getent, userdel and groupdel are run without a shell, with output
captured as text. userdel and groupdel usually live in an sbin directory
that is missing from an unprivileged user's PATH, so lookups fall back to
the standard sbin locations.
"""

import os
import shutil
import subprocess
from dataclasses import dataclass

# Searched after PATH when locating administrative commands
SBIN_DIRS = ("/usr/local/sbin", "/usr/sbin", "/sbin")


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Captured outcome of one command.

    Attributes:
        stdout: Standard output, decoded as text.
        stderr: Standard error, decoded as text.
        returncode: Exit status.
    """

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if the command exited with status 0."""
        return self.returncode == 0


def run_command(args: list[str], *, timeout: float | None = 60.0) -> CommandResult:
    """Run a command and capture its output.

    A non-zero exit status is reported in the result, not raised.

    Raises:
        subprocess.TimeoutExpired: If the command runs longer than timeout.
        OSError: If the executable cannot be started.
    """
    result = subprocess.run(args, capture_output=True, text=True, check=False, timeout=timeout)
    return CommandResult(stdout=result.stdout, stderr=result.stderr, returncode=result.returncode)


def command_exists(name: str) -> bool:
    """Check whether a command is on PATH or in one of the sbin directories."""
    if shutil.which(name) is not None:
        return True
    return shutil.which(name, path=os.pathsep.join(SBIN_DIRS)) is not None
