"""User account scanner implementation.

Enumerates user accounts from the passwd database.
"""

from sweepctl.models.entity import EntityKind
from sweepctl.scanners.getent import GetentScanner


class UserScanner(GetentScanner):
    """Scanner for user accounts (``getent passwd``)."""

    @property
    def kind(self) -> EntityKind:
        """Return USER as the entity kind."""
        return EntityKind.USER

    @property
    def database(self) -> str:
        return "passwd"
