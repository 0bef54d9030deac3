"""Exemption policies deciding which undeclared entities may be purged.

An ExemptionPolicy holds the protective rules configured for one entity
kind and classifies each undeclared entity as PURGE or KEEP. The rules are
evaluated in a fixed order, first match wins:

1. Well-known system names are always kept.
2. If only_ids is configured, it is the sole criterion.
3. Ids listed in exclude_ids are kept.
4. Ids at or below the system threshold are kept.
5. Anything else is purged.

Policies validate themselves on construction so that contradictory
configuration fails before any entity is looked at.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sweepctl.core.baseline import SYSTEM_GROUPS, SYSTEM_USERS
from sweepctl.core.errors import (
    ConflictingExemptionRulesError,
    InvalidThresholdError,
    OverlappingThresholdError,
    UnsupportedEntityKindError,
)
from sweepctl.core.idset import IdSet, IdSpec, parse_id_set
from sweepctl.models.decision import KeepReason, PurgeDecision
from sweepctl.models.entity import EntityKind

if TYPE_CHECKING:
    from sweepctl.models.entity import Entity

logger = logging.getLogger(__name__)

_DIGITS_RE = re.compile(r"\d+", re.ASCII)

# Inclusive id limit applied when a threshold is enabled without a value
DEFAULT_SYSTEM_THRESHOLD: int = 500

# Raw threshold values accepted from manifests
ThresholdSpec = int | bool | str | None


class DecisionStrategy(ABC):
    """Kind-specific parameters and decision procedure.

    Each supported EntityKind has exactly one strategy, registered in
    ``STRATEGIES``. The default decision procedure is shared; strategies
    supply the kind's protected names, id label and default threshold.
    """

    @property
    @abstractmethod
    def kind(self) -> EntityKind:
        """Return the entity kind this strategy handles."""

    @property
    @abstractmethod
    def id_label(self) -> str:
        """Return the name of the numeric id (e.g., 'uid')."""

    @property
    @abstractmethod
    def protected_names(self) -> frozenset[str]:
        """Return the built-in set of names that are never purged."""

    @property
    def default_threshold(self) -> int | None:
        """Return the threshold used when the manifest does not set one."""
        return DEFAULT_SYSTEM_THRESHOLD

    def decide(
        self,
        policy: ExemptionPolicy,
        entity: Entity,
        is_known_system_name: Callable[[str], bool],
    ) -> PurgeDecision:
        """Classify one entity under the given policy.

        The entity's id is only resolved once a rule that needs it is
        reached.

        Args:
            policy: Validated policy for this kind.
            entity: Undeclared entity to classify.
            is_known_system_name: Predicate for unconditionally protected names.

        Returns:
            PURGE, or KEEP with the reason of the first matching rule.

        Raises:
            EntityLookupError: If the entity's id is needed but cannot be resolved.
        """
        if is_known_system_name(entity.name):
            return PurgeDecision.keep(KeepReason.SYSTEM_NAME)

        if policy.only_ids is not None:
            if policy.only_ids.contains(entity.resolve_id()):
                return PurgeDecision.purge()
            return PurgeDecision.keep(KeepReason.NOT_IN_ONLY_IDS)

        if policy.exclude_ids is not None and policy.exclude_ids.contains(entity.resolve_id()):
            return PurgeDecision.keep(KeepReason.EXCLUDED_BY_ID)

        if policy.system_threshold is not None:
            if entity.resolve_id() > policy.system_threshold:
                return PurgeDecision.purge()
            return PurgeDecision.keep(KeepReason.BELOW_THRESHOLD)

        return PurgeDecision.purge()


class UserStrategy(DecisionStrategy):
    """Decision strategy for user accounts."""

    @property
    def kind(self) -> EntityKind:
        return EntityKind.USER

    @property
    def id_label(self) -> str:
        return "uid"

    @property
    def protected_names(self) -> frozenset[str]:
        return SYSTEM_USERS


class GroupStrategy(DecisionStrategy):
    """Decision strategy for groups."""

    @property
    def kind(self) -> EntityKind:
        return EntityKind.GROUP

    @property
    def id_label(self) -> str:
        return "gid"

    @property
    def protected_names(self) -> frozenset[str]:
        return SYSTEM_GROUPS


STRATEGIES: dict[EntityKind, DecisionStrategy] = {
    EntityKind.USER: UserStrategy(),
    EntityKind.GROUP: GroupStrategy(),
}


def get_strategy(kind: EntityKind) -> DecisionStrategy:
    """Look up the decision strategy for an entity kind.

    Raises:
        UnsupportedEntityKindError: If no strategy is registered for the kind.
    """
    try:
        return STRATEGIES[kind]
    except KeyError:
        raise UnsupportedEntityKindError(kind, "no decision strategy registered") from None


def normalize_threshold(value: ThresholdSpec, default: int | None) -> int | None:
    """Interpret a manifest system threshold value.

    Args:
        value: None (use the default), True (500), False (disabled), a
            non-negative integer, or a string of digits.
        default: Threshold to use when value is None.

    Returns:
        The inclusive threshold, or None if the rule is disabled.

    Raises:
        InvalidThresholdError: If the value cannot be interpreted.
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return DEFAULT_SYSTEM_THRESHOLD if value else None
    if isinstance(value, int):
        if value < 0:
            msg = f"System threshold must be non-negative, got {value}"
            raise InvalidThresholdError(msg)
        return value
    if isinstance(value, str) and _DIGITS_RE.fullmatch(value.strip()):
        return int(value.strip())

    msg = f"Invalid system threshold {value!r}"
    raise InvalidThresholdError(msg)


@dataclass(frozen=True, slots=True)
class ExemptionPolicy:
    """Protective rules for one entity kind.

    Empty id sets are treated as not configured.

    Attributes:
        kind: Entity kind this policy governs.
        system_threshold: Ids at or below this value are kept (None disables).
        only_ids: If set, only entities with ids in this set may be purged.
        exclude_ids: Entities with ids in this set are kept.
        protected_names: Names that are always kept. None means the kind's
            built-in set of system names.
    """

    kind: EntityKind
    system_threshold: int | None = None
    only_ids: IdSet | None = None
    exclude_ids: IdSet | None = None
    protected_names: frozenset[str] | None = None

    def __post_init__(self) -> None:
        """Normalize empty id sets and validate the rule combination."""
        if self.only_ids is not None and self.only_ids.is_empty():
            object.__setattr__(self, "only_ids", None)
        if self.exclude_ids is not None and self.exclude_ids.is_empty():
            object.__setattr__(self, "exclude_ids", None)
        self.validate()

    @classmethod
    def from_settings(
        cls,
        kind: EntityKind,
        *,
        system_threshold: ThresholdSpec = None,
        only_ids: IdSpec = None,
        exclude_ids: IdSpec = None,
        protected_names: frozenset[str] | None = None,
    ) -> ExemptionPolicy:
        """Build a policy from raw manifest values.

        Args:
            kind: Entity kind to build the policy for.
            system_threshold: Raw threshold (see normalize_threshold).
            only_ids: Raw id specification for the allowlist.
            exclude_ids: Raw id specification for the denylist.
            protected_names: Override for the kind's built-in protected names.

        Returns:
            A validated ExemptionPolicy.

        Raises:
            UnsupportedEntityKindError: If the kind has no decision strategy.
            ExemptionConfigError: If any value is malformed or the rules conflict.
        """
        strategy = get_strategy(kind)
        return cls(
            kind=kind,
            system_threshold=normalize_threshold(system_threshold, strategy.default_threshold),
            only_ids=parse_id_set(only_ids),
            exclude_ids=parse_id_set(exclude_ids),
            protected_names=protected_names,
        )

    @property
    def strategy(self) -> DecisionStrategy:
        """Decision strategy for this policy's kind."""
        return get_strategy(self.kind)

    @property
    def known_system_names(self) -> frozenset[str]:
        """Names that are kept unconditionally."""
        if self.protected_names is not None:
            return self.protected_names
        return self.strategy.protected_names

    def validate(self) -> None:
        """Reject rule combinations that contradict each other.

        Raises:
            InvalidThresholdError: If the threshold is negative.
            ConflictingExemptionRulesError: If only_ids and exclude_ids are both set.
            OverlappingThresholdError: If only_ids reaches at or below the threshold.
        """
        kind = self.kind.value

        if self.system_threshold is not None and self.system_threshold < 0:
            msg = f"{kind}: system threshold must be non-negative, got {self.system_threshold}"
            raise InvalidThresholdError(msg)

        if self.only_ids is not None and self.exclude_ids is not None:
            msg = f"{kind}: only_ids and exclude_ids must not be used at the same time"
            raise ConflictingExemptionRulesError(msg)

        if self.only_ids is not None and self.system_threshold is not None:
            lowest = self.only_ids.lowest
            if lowest is not None and lowest <= self.system_threshold:
                msg = (
                    f"{kind}: only_ids ({self.only_ids}) must not overlap the system "
                    f"threshold ({self.system_threshold}); lowest id is {lowest}"
                )
                raise OverlappingThresholdError(msg)

    def decide(
        self,
        entity: Entity,
        is_known_system_name: Callable[[str], bool] | None = None,
    ) -> PurgeDecision:
        """Decide whether an undeclared entity is purged or kept.

        Args:
            entity: The entity to classify. Must be of this policy's kind.
            is_known_system_name: Predicate overriding the protected-name
                lookup. Defaults to membership in known_system_names.

        Returns:
            The PurgeDecision for the entity.

        Raises:
            ValueError: If the entity's kind does not match the policy.
            EntityLookupError: If the entity's id is needed but cannot be resolved.
        """
        if entity.kind != self.kind:
            msg = (
                f"Cannot decide {entity.kind.value} '{entity.name}' "
                f"with a {self.kind.value} policy"
            )
            raise ValueError(msg)

        predicate = is_known_system_name or self.known_system_names.__contains__
        decision = self.strategy.decide(self, entity, predicate)
        logger.debug("%s '%s': %s", self.kind.value, entity.name, decision)
        return decision
