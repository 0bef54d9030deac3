"""User account operator implementation.

Removes user accounts using userdel.
"""

from sweepctl.models.entity import EntityKind
from sweepctl.operators.shadow import ShadowOperator


class UserOperator(ShadowOperator):
    """Operator for user accounts.

    Home directories and mail spools are left in place; only the account
    entry is removed.
    """

    @property
    def kind(self) -> EntityKind:
        """Return USER as the entity kind."""
        return EntityKind.USER

    @property
    def command(self) -> str:
        return "userdel"

    @property
    def database(self) -> str:
        return "passwd"
