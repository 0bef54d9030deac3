"""Execution of planned purge actions.

Provides operator lookup and action dispatching for the purge command.
Each action is applied independently: a failing action, or a kind whose
tooling is missing, never stops the remaining actions.

Users are removed before groups. userdel drops a user's private group on
systems with USERGROUPS_ENAB, so a planned removal of that group is
reported as done once the group is gone.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from sweepctl.core.registry import get_operator
from sweepctl.models.action import PurgeActionResult
from sweepctl.models.entity import EntityKind

if TYPE_CHECKING:
    from sweepctl.models.action import PurgeAction
    from sweepctl.operators.base import Operator

logger = logging.getLogger(__name__)

# Kinds in the order their actions are applied
_REMOVAL_ORDER = (EntityKind.USER, EntityKind.GROUP)


def get_operators(kinds: Iterable[EntityKind], dry_run: bool = False) -> list[Operator]:
    """Get operator instances for the given kinds.

    Args:
        kinds: Entity kinds to get operators for.
        dry_run: Whether to run in dry-run mode.

    Returns:
        List of operator instances, one per kind.
    """
    return [get_operator(kind, dry_run=dry_run) for kind in kinds]


def apply_actions(
    actions: list[PurgeAction],
    operators: list[Operator],
) -> list[PurgeActionResult]:
    """Apply purge actions using the matching operators.

    Groups actions by kind and dispatches each group to the operator for
    that kind, users first. Actions without a usable operator are reported
    as failed.

    Args:
        actions: Actions to apply, typically ``PurgePlan.actions``.
        operators: Operators to dispatch to.

    Returns:
        List of PurgeActionResult for all actions, grouped by kind.
    """
    operators_by_kind = {op.kind: op for op in operators}

    actions_by_kind: dict[EntityKind, list[PurgeAction]] = {}
    for action in actions:
        actions_by_kind.setdefault(action.kind, []).append(action)

    results: list[PurgeActionResult] = []
    removed_users: set[str] = set()

    for kind in sorted(actions_by_kind, key=_removal_rank):
        kind_actions = actions_by_kind[kind]
        operator = operators_by_kind.get(kind)
        if operator is None:
            results.extend(_fail_all(kind_actions, f"No operator for {kind.value}"))
            continue

        if kind == EntityKind.GROUP and removed_users:
            covered, kind_actions = _split_private_groups(kind_actions, operator, removed_users)
            results.extend(covered)
            if not kind_actions:
                continue

        try:
            kind_results = operator.execute(kind_actions)
        except RuntimeError as e:
            logger.warning("Cannot apply %s actions: %s", kind.value, e)
            results.extend(_fail_all(kind_actions, str(e)))
            continue

        results.extend(kind_results)
        if kind == EntityKind.USER:
            removed_users.update(
                r.action.name
                for r in kind_results
                if r.success and not r.dry_run and not r.action.noop
            )

    return results


def _removal_rank(kind: EntityKind) -> int:
    return _REMOVAL_ORDER.index(kind) if kind in _REMOVAL_ORDER else len(_REMOVAL_ORDER)


def _split_private_groups(
    actions: list[PurgeAction],
    operator: Operator,
    removed_users: set[str],
) -> tuple[list[PurgeActionResult], list[PurgeAction]]:
    """Separate group actions already carried out by userdel.

    Returns:
        Results for groups that disappeared with their user, and the
        actions that still need groupdel.
    """
    covered: list[PurgeActionResult] = []
    remaining: list[PurgeAction] = []
    for action in actions:
        if (
            not action.noop
            and action.name in removed_users
            and not operator.exists(action.name)
        ):
            logger.info("Group %s was removed together with its user", action.name)
            covered.append(
                PurgeActionResult(action=action, success=True, message="Removed with user")
            )
        else:
            remaining.append(action)
    return covered, remaining


def _fail_all(actions: list[PurgeAction], error: str) -> list[PurgeActionResult]:
    """Create failed results for a group of actions."""
    return [PurgeActionResult(action=action, success=False, error=error) for action in actions]
