"""Group scanner implementation.

Enumerates groups from the group database.
"""

from sweepctl.models.entity import EntityKind
from sweepctl.scanners.getent import GetentScanner


class GroupScanner(GetentScanner):
    """Scanner for groups (``getent group``)."""

    @property
    def kind(self) -> EntityKind:
        """Return GROUP as the entity kind."""
        return EntityKind.GROUP

    @property
    def database(self) -> str:
        return "group"
