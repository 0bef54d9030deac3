"""Decision models for purge classification.

Every undeclared entity ends up with exactly one PurgeDecision: purge it,
or keep it for a stated reason.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DecisionType(Enum):
    """Outcome of a purge decision."""

    PURGE = "purge"
    KEEP = "keep"


class KeepReason(str, Enum):
    """Reason why an entity is protected from purging.

    Attributes:
        SYSTEM_NAME: The name is a well-known system account or group.
        NOT_IN_ONLY_IDS: An only_ids allowlist is configured and the id is not in it.
        EXCLUDED_BY_ID: The id is listed in exclude_ids.
        BELOW_THRESHOLD: The id is at or below the system threshold.
    """

    SYSTEM_NAME = "hardcoded system entity"
    NOT_IN_ONLY_IDS = "not in only-id allowlist"
    EXCLUDED_BY_ID = "excluded by id"
    BELOW_THRESHOLD = "at or below system threshold"


@dataclass(frozen=True, slots=True)
class PurgeDecision:
    """Result of evaluating one entity against an exemption policy.

    Attributes:
        decision: Whether the entity is purged or kept.
        reason: Why the entity is kept (None for purge decisions).
    """

    decision: DecisionType
    reason: KeepReason | None = None

    def __post_init__(self) -> None:
        """Validate that keep decisions carry a reason and purges do not."""
        if self.decision == DecisionType.KEEP and self.reason is None:
            msg = "Keep decisions require a reason"
            raise ValueError(msg)
        if self.decision == DecisionType.PURGE and self.reason is not None:
            msg = "Purge decisions cannot carry a keep reason"
            raise ValueError(msg)

    @classmethod
    def purge(cls) -> PurgeDecision:
        """Create a purge decision."""
        return cls(decision=DecisionType.PURGE)

    @classmethod
    def keep(cls, reason: KeepReason) -> PurgeDecision:
        """Create a keep decision with the given reason."""
        return cls(decision=DecisionType.KEEP, reason=reason)

    @property
    def should_purge(self) -> bool:
        """Check if the entity should be purged."""
        return self.decision == DecisionType.PURGE

    def __str__(self) -> str:
        if self.reason is None:
            return self.decision.value
        return f"{self.decision.value} ({self.reason.value})"
