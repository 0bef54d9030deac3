"""Exception hierarchy for purge planning.

Configuration-time errors abort policy construction and are fatal to the
run's setup. Per-entity errors are recorded and reported individually; the
decision pipeline keeps going over the remaining candidates.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sweepctl.models.entity import EntityKind


class SweepError(Exception):
    """Base exception for all sweepctl errors."""


class ExemptionConfigError(SweepError):
    """Base exception for invalid exemption configuration."""


class InvalidIdSpecError(ExemptionConfigError):
    """Raised when an id list contains a malformed token or inverted range."""


class InvalidThresholdError(ExemptionConfigError):
    """Raised when a system threshold value cannot be interpreted."""


class ConflictingExemptionRulesError(ExemptionConfigError):
    """Raised when only_ids and exclude_ids are both configured."""


class OverlappingThresholdError(ExemptionConfigError):
    """Raised when only_ids reaches at or below the system threshold."""


class UnsupportedEntityKindError(SweepError):
    """Raised when an entity kind cannot be enumerated or safely deleted."""

    def __init__(self, kind: EntityKind | str, detail: str | None = None) -> None:
        self.kind = kind
        name = getattr(kind, "value", kind)
        message = f"Purging entities of kind '{name}' is not supported"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class MarkAbsentError(SweepError):
    """Raised when an entity cannot be marked absent."""


class EntityLookupError(SweepError):
    """Raised when an entity's numeric id cannot be resolved."""


class PerEntityApplyError(SweepError):
    """A single candidate failed and was skipped.

    Never raised out of the decision pipeline; collected and reported.

    Attributes:
        entity_name: Name of the candidate that failed.
        kind: Entity kind of the candidate.
        cause: Underlying exception.
    """

    def __init__(self, entity_name: str, kind: EntityKind, cause: Exception) -> None:
        self.entity_name = entity_name
        self.kind = kind
        self.cause = cause
        super().__init__(f"{kind.value} '{entity_name}': {cause}")
