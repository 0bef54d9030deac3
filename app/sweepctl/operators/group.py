"""Group operator implementation.

Removes groups using groupdel.
"""

from sweepctl.models.entity import EntityKind
from sweepctl.operators.shadow import ShadowOperator


class GroupOperator(ShadowOperator):
    """Operator for groups.

    groupdel refuses to remove a group that is still the primary group of
    an existing user; that shows up as a failed result for the group.
    """

    @property
    def kind(self) -> EntityKind:
        """Return GROUP as the entity kind."""
        return EntityKind.GROUP

    @property
    def command(self) -> str:
        return "groupdel"

    @property
    def database(self) -> str:
        return "group"
