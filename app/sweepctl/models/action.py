"""Action models for purge operations.

This module defines data structures for representing purge actions emitted
by the decision pipeline and their execution results.
"""

from dataclasses import dataclass

from sweepctl.models.entity import EntityKind


@dataclass(frozen=True, slots=True)
class PurgeAction:
    """Represents one undeclared entity marked for removal.

    Attributes:
        name: Name of the entity to remove.
        kind: Kind of the entity (user or group).
        entity_id: Resolved uid/gid, if the decision needed it.
        noop: Inherited from the purge settings; if True the action is only
            reported, never executed.
        reason: Optional explanation for why this action is being taken.
    """

    name: str
    kind: EntityKind
    entity_id: int | None = None
    noop: bool = False
    reason: str | None = None

    def __post_init__(self) -> None:
        """Validate action data after initialization."""
        if not self.name:
            msg = "Entity name cannot be empty"
            raise ValueError(msg)

    @property
    def label(self) -> str:
        """Human-readable label such as ``user 'alice' (uid 1001)``."""
        from sweepctl.core.policy import get_strategy

        label = f"{self.kind.value} '{self.name}'"
        if self.entity_id is not None:
            label = f"{label} ({get_strategy(self.kind).id_label} {self.entity_id})"
        return label


@dataclass(frozen=True, slots=True)
class PurgeActionResult:
    """Result of applying a purge action.

    Attributes:
        action: The action that was applied.
        success: Whether the action completed successfully.
        message: Optional success message or additional information.
        error: Optional error message if the action failed.
        dry_run: Whether the action was only simulated.
    """

    action: PurgeAction
    success: bool
    message: str | None = None
    error: str | None = None
    dry_run: bool = False

    @property
    def failed(self) -> bool:
        """Check if the action failed."""
        return not self.success
