"""Purge planning from manifest and live system state.

Builds the exemption policy for every kind with purging enabled, then runs
each kind's live entities through the PurgeDecider. All policies are built
before any entity is scanned, so a configuration error aborts the run
before anything else happens. The resulting plan is complete before any
action is applied.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sweepctl.core.decider import CandidateOutcome, OutcomeStatus, PurgeDecider
from sweepctl.core.policy import ExemptionPolicy
from sweepctl.core.registry import can_safely_delete, ensure_purgeable, get_operator, get_scanner

if TYPE_CHECKING:
    from sweepctl.core.errors import PerEntityApplyError
    from sweepctl.models.action import PurgeAction
    from sweepctl.models.entity import EntityKind
    from sweepctl.models.manifest import Manifest, PurgeSettings
    from sweepctl.operators.base import Operator
    from sweepctl.scanners.base import Scanner

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PurgePlan:
    """Everything a purge run decided, before anything is applied.

    Attributes:
        outcomes: One outcome per scanned entity, in scan order per kind.
        skipped_kinds: Kinds whose purge setting is disabled.
    """

    outcomes: tuple[CandidateOutcome, ...]
    skipped_kinds: tuple[EntityKind, ...] = ()

    @property
    def actions(self) -> tuple[PurgeAction, ...]:
        """Purge actions in candidate order."""
        return tuple(o.action for o in self.outcomes if o.action is not None)

    @property
    def errors(self) -> tuple[PerEntityApplyError, ...]:
        """Per-entity errors recorded while planning."""
        return tuple(o.error for o in self.outcomes if o.error is not None)

    def with_status(self, status: OutcomeStatus) -> tuple[CandidateOutcome, ...]:
        """Outcomes with the given status."""
        return tuple(o for o in self.outcomes if o.status == status)

    @property
    def is_empty(self) -> bool:
        """Check if nothing would be purged."""
        return not self.actions

    def summary(self) -> dict[str, int]:
        """Count outcomes by status."""
        counts = {status.value: 0 for status in OutcomeStatus}
        for outcome in self.outcomes:
            counts[outcome.status.value] += 1
        return counts

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            "summary": self.summary(),
            "skipped_kinds": [kind.value for kind in self.skipped_kinds],
            "outcomes": [_outcome_to_dict(o) for o in self.outcomes],
        }


def _outcome_to_dict(outcome: CandidateOutcome) -> dict[str, object]:
    """Convert a CandidateOutcome to a dictionary with non-None fields."""
    result: dict[str, object] = {
        "name": outcome.name,
        "kind": outcome.kind.value,
        "status": outcome.status.value,
    }
    if outcome.entity_id is not None:
        result["id"] = outcome.entity_id
    if outcome.reason is not None:
        result["reason"] = outcome.reason.value
    if outcome.action is not None:
        result["noop"] = outcome.action.noop
    if outcome.error is not None:
        result["error"] = str(outcome.error.cause)
    return result


def build_policy(kind: EntityKind, settings: PurgeSettings) -> ExemptionPolicy:
    """Build and validate the exemption policy for one kind.

    Args:
        kind: Entity kind the settings apply to.
        settings: The kind's [purge.<kind>] manifest table.

    Returns:
        A validated ExemptionPolicy.

    Raises:
        UnsupportedEntityKindError: If purging is enabled for a kind that
            cannot be enumerated or removed.
        ExemptionConfigError: If the settings are malformed or contradictory.
    """
    if settings.purge:
        ensure_purgeable(kind)

    return ExemptionPolicy.from_settings(
        kind,
        system_threshold=settings.system_threshold,
        only_ids=settings.only_ids,
        exclude_ids=settings.exclude_ids,
    )


def plan_purge(
    manifest: Manifest,
    kinds: Iterable[EntityKind],
    *,
    scanner_factory: Callable[[EntityKind], Scanner] = get_scanner,
    operator_factory: Callable[[EntityKind], Operator] = get_operator,
) -> PurgePlan:
    """Decide what to purge for the requested kinds.

    Args:
        manifest: Manifest with declared entities and purge settings.
        kinds: Entity kinds to plan for.
        scanner_factory: Returns the scanner for a kind.
        operator_factory: Returns the operator for a kind; only its
            check_removable() is used while planning.

    Returns:
        The complete PurgePlan.

    Raises:
        UnsupportedEntityKindError: If a kind with purging enabled is unsupported.
        ExemptionConfigError: If a kind's purge settings are invalid.
        RuntimeError: If a scanner cannot query the system.
    """
    policies: dict[EntityKind, ExemptionPolicy] = {}
    skipped: list[EntityKind] = []

    for kind in kinds:
        settings = manifest.purge_settings(kind)
        if not settings.purge:
            logger.debug("Purging disabled for %s", kind.value)
            skipped.append(kind)
            continue
        policies[kind] = build_policy(kind, settings)

    outcomes: list[CandidateOutcome] = []

    for kind, policy in policies.items():
        operator = operator_factory(kind)
        decider = PurgeDecider(
            {kind: policy},
            attempt_mark_absent=operator.check_removable,
            noop=manifest.purge_settings(kind).noop,
        )
        scanner = scanner_factory(kind)
        kind_outcomes = list(
            decider.evaluate(kind, scanner.scan(), manifest.is_declared, can_safely_delete)
        )
        outcomes.extend(kind_outcomes)
        logger.debug(
            "Planned %s: %d candidates, %d errors",
            kind.value,
            len(kind_outcomes),
            len(decider.errors),
        )

    return PurgePlan(outcomes=tuple(outcomes), skipped_kinds=tuple(skipped))
