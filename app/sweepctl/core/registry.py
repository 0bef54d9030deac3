"""Entity kind registry.

Maps each purgeable entity kind to the scanner that enumerates it and the
operator that removes it. A kind is only purgeable if it has both.
"""

from sweepctl.core.errors import UnsupportedEntityKindError
from sweepctl.models.entity import EntityKind
from sweepctl.operators.base import Operator
from sweepctl.operators.group import GroupOperator
from sweepctl.operators.user import UserOperator
from sweepctl.scanners.base import Scanner
from sweepctl.scanners.group import GroupScanner
from sweepctl.scanners.user import UserScanner

SCANNERS: dict[EntityKind, type[Scanner]] = {
    EntityKind.USER: UserScanner,
    EntityKind.GROUP: GroupScanner,
}

OPERATORS: dict[EntityKind, type[Operator]] = {
    EntityKind.USER: UserOperator,
    EntityKind.GROUP: GroupOperator,
}


def get_scanner(kind: EntityKind) -> Scanner:
    """Get a scanner instance for a kind.

    Raises:
        UnsupportedEntityKindError: If the kind cannot be enumerated.
    """
    try:
        return SCANNERS[kind]()
    except KeyError:
        msg = "entities cannot be queried from the system"
        raise UnsupportedEntityKindError(kind, msg) from None


def get_operator(kind: EntityKind, dry_run: bool = False) -> Operator:
    """Get an operator instance for a kind.

    Raises:
        UnsupportedEntityKindError: If the kind cannot be removed.
    """
    try:
        return OPERATORS[kind](dry_run=dry_run)
    except KeyError:
        raise UnsupportedEntityKindError(kind, "entities cannot be removed") from None


def can_safely_delete(kind: EntityKind) -> bool:
    """Check if a kind has a removal operation at all.

    This is a capability of the kind, not of the current machine: whether
    userdel is installed is checked when actions are applied.
    """
    return kind in OPERATORS


def ensure_purgeable(kind: EntityKind) -> None:
    """Check that a kind can be both enumerated and removed.

    Raises:
        UnsupportedEntityKindError: If the kind lacks a scanner or an operator.
    """
    if kind not in SCANNERS:
        raise UnsupportedEntityKindError(kind, "entities cannot be queried from the system")
    if not can_safely_delete(kind):
        raise UnsupportedEntityKindError(kind, "entities cannot be removed")
