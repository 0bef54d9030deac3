"""Shared getent-based scanner implementation.

Both the passwd and group databases share the same colon-separated
layout with the name in the first field and the numeric id in the third,
so users and groups are enumerated the same way.
"""

import logging
import subprocess
from abc import abstractmethod
from collections.abc import Iterator
from functools import partial

from sweepctl.models.entity import Entity
from sweepctl.scanners.base import Scanner
from sweepctl.utils.shell import command_exists, run_command

logger = logging.getLogger(__name__)


def parse_numeric_id(raw: str) -> int:
    """Parse a uid/gid field.

    Raises:
        ValueError: If the field is not a non-negative integer.
    """
    value = raw.strip()
    if not value.isdigit():
        msg = f"invalid numeric id field {raw!r}"
        raise ValueError(msg)
    return int(value)


class GetentScanner(Scanner):
    """Scanner reading a name service database through ``getent``.

    Using getent rather than reading /etc files directly also covers
    entities provided by NSS modules (LDAP, SSSD, systemd-homed).
    """

    # Timeout for getent queries (large directories can be slow)
    _GETENT_TIMEOUT: float = 60.0

    @property
    @abstractmethod
    def database(self) -> str:
        """Return the getent database name (e.g., 'passwd')."""

    def is_available(self) -> bool:
        """Check if getent is available."""
        return command_exists("getent")

    def scan(self) -> Iterator[Entity]:
        """Scan all entries of the database.

        Yields:
            Entity for each entry, with a lazily parsed id.

        Raises:
            RuntimeError: If getent is unavailable or fails.
        """
        if not self.is_available():
            msg = "getent is not available on this system"
            raise RuntimeError(msg)

        try:
            result = run_command(["getent", self.database], timeout=self._GETENT_TIMEOUT)
        except subprocess.TimeoutExpired as e:
            msg = f"getent {self.database} timed out after {e.timeout:g}s"
            raise RuntimeError(msg) from e

        if not result.success:
            msg = f"getent {self.database} failed: {result.stderr.strip() or 'unknown error'}"
            raise RuntimeError(msg)

        # NSS may list an entry from several sources; the first one wins
        seen: set[str] = set()
        for line in result.stdout.splitlines():
            if not line.strip():
                continue

            entity = self._parse_line(line)
            if entity is None:
                continue
            if entity.name in seen:
                logger.debug("Skipping duplicate %s entry %r", self.database, entity.name)
                continue
            seen.add(entity.name)
            yield entity

    def _parse_line(self, line: str) -> Entity | None:
        """Parse a single line of getent output.

        The id field is not validated here; a bad value only surfaces
        when a policy needs the id of that one entity.

        Args:
            line: Colon-separated database entry.

        Returns:
            Entity if the line has a name, None otherwise.
        """
        fields = line.split(":")
        name = fields[0].strip()

        if not name:
            logger.debug("Skipping %s line without a name: %r", self.database, line[:100])
            return None

        raw_id = fields[2] if len(fields) > 2 else ""
        return Entity(name=name, kind=self.kind, id_resolver=partial(parse_numeric_id, raw_id))
