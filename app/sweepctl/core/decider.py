"""Purge decision pipeline.

The PurgeDecider walks the live entities of one kind and turns the
undeclared, unprotected ones into PurgeActions:

    candidates -> not declared -> removable -> policy says PURGE -> action

Candidates are pulled lazily, one at a time. A failure on one candidate
(an id that cannot be resolved, a name the operator refuses) is recorded
as a PerEntityApplyError and the pipeline moves on to the next one.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum

from sweepctl.core.errors import (
    EntityLookupError,
    MarkAbsentError,
    PerEntityApplyError,
    UnsupportedEntityKindError,
)
from sweepctl.core.policy import ExemptionPolicy
from sweepctl.models.action import PurgeAction
from sweepctl.models.decision import KeepReason
from sweepctl.models.entity import Entity, EntityKind

logger = logging.getLogger(__name__)

# Collaborator signatures
IsDeclared = Callable[[Entity], bool]
CanSafelyDelete = Callable[[EntityKind], bool]
AttemptMarkAbsent = Callable[[Entity], None]


class OutcomeStatus(Enum):
    """What happened to a candidate in the pipeline.

    Attributes:
        DECLARED: The entity is declared in the manifest and left alone.
        KEPT: The exemption policy protects the entity.
        PURGE: The entity is scheduled for removal.
        ERROR: The entity could not be evaluated and was skipped.
    """

    DECLARED = "declared"
    KEPT = "kept"
    PURGE = "purge"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class CandidateOutcome:
    """Pipeline result for a single candidate.

    Attributes:
        name: Entity name.
        kind: Entity kind.
        status: Outcome of the pipeline.
        entity_id: Resolved id, if the pipeline needed it.
        reason: Keep reason for KEPT outcomes.
        action: The emitted action for PURGE outcomes.
        error: The recorded error for ERROR outcomes.
    """

    name: str
    kind: EntityKind
    status: OutcomeStatus
    entity_id: int | None = None
    reason: KeepReason | None = None
    action: PurgeAction | None = None
    error: PerEntityApplyError | None = None


def _always_removable(entity: Entity) -> None:
    """Default mark-absent check that accepts every entity."""


class PurgeDecider:
    """Drives exemption policies over live candidates.

    Example:
        >>> decider = PurgeDecider({EntityKind.GROUP: policy})
        >>> actions = decider.run(
        ...     EntityKind.GROUP, scanner.scan(), manifest.is_declared, can_safely_delete
        ... )
    """

    def __init__(
        self,
        policies: Mapping[EntityKind, ExemptionPolicy],
        *,
        attempt_mark_absent: AttemptMarkAbsent | None = None,
        noop: bool = False,
    ) -> None:
        """Initialize the decider.

        Args:
            policies: Exactly one policy per entity kind.
            attempt_mark_absent: Speculative removal check, raising
                MarkAbsentError for entities that cannot be removed.
            noop: Inherited by every emitted action.

        Raises:
            ValueError: If a policy is registered under the wrong kind.
        """
        for kind, policy in policies.items():
            if policy.kind != kind:
                msg = f"Policy for {policy.kind.value} registered under {kind.value}"
                raise ValueError(msg)

        self._policies = dict(policies)
        self._attempt_mark_absent = attempt_mark_absent or _always_removable
        self._noop = noop
        self._errors: list[PerEntityApplyError] = []

    @property
    def noop(self) -> bool:
        """Check if emitted actions are marked no-op."""
        return self._noop

    @property
    def errors(self) -> list[PerEntityApplyError]:
        """Per-entity errors recorded during the current or last pass."""
        return list(self._errors)

    def policy_for(self, kind: EntityKind) -> ExemptionPolicy:
        """Return the policy governing a kind.

        Raises:
            UnsupportedEntityKindError: If no policy was supplied for the kind.
        """
        try:
            return self._policies[kind]
        except KeyError:
            raise UnsupportedEntityKindError(kind, "no exemption policy configured") from None

    def run(
        self,
        kind: EntityKind,
        candidates: Iterable[Entity],
        is_declared: IsDeclared,
        can_safely_delete: CanSafelyDelete,
    ) -> Iterator[PurgeAction]:
        """Yield a PurgeAction for every candidate that should be purged.

        The kind-level checks run immediately; the candidates are then
        evaluated lazily as the returned iterator is consumed. Actions come
        out in candidate order.

        Args:
            kind: Entity kind being purged.
            candidates: Live entities of that kind.
            is_declared: True for entities already managed by the manifest.
            can_safely_delete: True if the kind supports removal at all.

        Returns:
            Iterator of PurgeActions.

        Raises:
            UnsupportedEntityKindError: If the kind has no policy or cannot be
                deleted safely. Raised once, before any candidate is read.
        """
        outcomes = self.evaluate(kind, candidates, is_declared, can_safely_delete)
        return (outcome.action for outcome in outcomes if outcome.action is not None)

    def evaluate(
        self,
        kind: EntityKind,
        candidates: Iterable[Entity],
        is_declared: IsDeclared,
        can_safely_delete: CanSafelyDelete,
    ) -> Iterator[CandidateOutcome]:
        """Yield a CandidateOutcome for every candidate.

        Same pipeline as run(), but also reports declared, kept and failed
        candidates so callers can explain every decision.

        Raises:
            UnsupportedEntityKindError: If the kind has no policy or cannot be
                deleted safely.
        """
        policy = self.policy_for(kind)

        if not can_safely_delete(kind):
            raise UnsupportedEntityKindError(kind, "no safe removal is available")

        self._errors = []
        return self._evaluate_candidates(policy, candidates, is_declared)

    def _evaluate_candidates(
        self,
        policy: ExemptionPolicy,
        candidates: Iterable[Entity],
        is_declared: IsDeclared,
    ) -> Iterator[CandidateOutcome]:
        """Evaluate candidates one by one, isolating per-entity failures."""
        for entity in candidates:
            if entity.kind != policy.kind:
                logger.debug(
                    "Skipping %s '%s' in %s pass", entity.kind.value, entity.name, policy.kind.value
                )
                continue

            if is_declared(entity):
                yield CandidateOutcome(
                    name=entity.name,
                    kind=entity.kind,
                    status=OutcomeStatus.DECLARED,
                    entity_id=entity.resolved_id,
                )
                continue

            try:
                self._attempt_mark_absent(entity)
                decision = policy.decide(entity)
            except (MarkAbsentError, EntityLookupError) as e:
                error = PerEntityApplyError(entity.name, entity.kind, e)
                self._errors.append(error)
                logger.warning("Skipping %s", error)
                yield CandidateOutcome(
                    name=entity.name,
                    kind=entity.kind,
                    status=OutcomeStatus.ERROR,
                    entity_id=entity.resolved_id,
                    error=error,
                )
                continue

            if not decision.should_purge:
                yield CandidateOutcome(
                    name=entity.name,
                    kind=entity.kind,
                    status=OutcomeStatus.KEPT,
                    entity_id=entity.resolved_id,
                    reason=decision.reason,
                )
                continue

            action = PurgeAction(
                name=entity.name,
                kind=entity.kind,
                entity_id=entity.resolved_id,
                noop=self._noop,
                reason="Not declared in manifest",
            )
            logger.info("Purging %s (noop=%s)", action.label, action.noop)
            yield CandidateOutcome(
                name=entity.name,
                kind=entity.kind,
                status=OutcomeStatus.PURGE,
                entity_id=entity.resolved_id,
                action=action,
            )
