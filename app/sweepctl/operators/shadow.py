"""Shared shadow-utils operator implementation.

userdel and groupdel take the same shape of command line, so user and
group removal share one implementation. Each entity is removed with its
own command, so one failure never marks the others as failed.
"""

import logging
import re
import subprocess
from abc import abstractmethod

from sweepctl.core.errors import MarkAbsentError
from sweepctl.models.action import PurgeAction, PurgeActionResult
from sweepctl.models.entity import Entity
from sweepctl.operators.base import Operator
from sweepctl.utils.shell import command_exists, run_command

logger = logging.getLogger(__name__)

# getent exit status for "key not found in database"
_GETENT_NOT_FOUND = 2

# Names that could be mistaken for options or that break the database format
_UNSAFE_NAME_RE = re.compile(r"^-|[\s:/]")


class ShadowOperator(Operator):
    """Operator removing entities with a shadow-utils command.

    Requires sudo privileges for actual execution. In dry-run mode the
    command is logged and reported as successful without running it.
    """

    # Timeout for a single removal
    _REMOVE_TIMEOUT: float = 60.0

    @property
    @abstractmethod
    def command(self) -> str:
        """Return the removal command (e.g., 'userdel')."""

    @property
    @abstractmethod
    def database(self) -> str:
        """Return the getent database holding the entities (e.g., 'passwd')."""

    def is_available(self) -> bool:
        """Check if the removal command is available."""
        return command_exists(self.command)

    def exists(self, name: str) -> bool:
        """Look the name up with getent.

        Only a definite "not found" counts as absent; any other failure is
        treated as the entity still existing.
        """
        try:
            result = run_command(["getent", self.database, name], timeout=self._REMOVE_TIMEOUT)
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning("Cannot look up %s '%s': %s", self.database, name, e)
            return True
        return result.returncode != _GETENT_NOT_FOUND

    def check_removable(self, entity: Entity) -> None:
        """Reject entities whose names cannot be passed to the command safely.

        Raises:
            MarkAbsentError: If the entity is of another kind or has an unsafe name.
        """
        if entity.kind != self.kind:
            msg = f"{self.command} cannot remove a {entity.kind.value}"
            raise MarkAbsentError(msg)
        if _UNSAFE_NAME_RE.search(entity.name):
            msg = f"{self.command} cannot safely remove '{entity.name}'"
            raise MarkAbsentError(msg)

    def remove(self, names: list[str]) -> list[PurgeActionResult]:
        """Remove entities one by one.

        Args:
            names: Entity names to remove.

        Returns:
            List of PurgeActionResult, one per name.

        Raises:
            RuntimeError: If the removal command is not available.
        """
        if not self.is_available():
            msg = f"{self.command} is not available on this system"
            raise RuntimeError(msg)

        return [self._remove_one(name) for name in names]

    def _remove_one(self, name: str) -> PurgeActionResult:
        """Run the removal command for a single entity."""
        action = PurgeAction(name=name, kind=self.kind)
        args = ["sudo", self.command, name]

        if self.dry_run:
            logger.info("Dry-run: would execute %s", " ".join(args))
            return PurgeActionResult(
                action=action,
                success=True,
                message="Dry-run completed",
                dry_run=True,
            )

        logger.info("Executing %s", " ".join(args))
        try:
            result = run_command(args, timeout=self._REMOVE_TIMEOUT)
        except (OSError, subprocess.TimeoutExpired) as e:
            return PurgeActionResult(action=action, success=False, error=str(e))

        if result.success:
            return PurgeActionResult(action=action, success=True, message="Removed")

        error_msg = result.stderr.strip() or f"{self.command} exited with {result.returncode}"
        return PurgeActionResult(action=action, success=False, error=error_msg)
