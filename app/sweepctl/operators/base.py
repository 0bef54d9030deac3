"""Abstract base class for entity operators.

This module defines the Operator interface that all removal operators
must implement.
"""

from abc import ABC, abstractmethod

from sweepctl.models.action import PurgeAction, PurgeActionResult
from sweepctl.models.entity import Entity, EntityKind


class Operator(ABC):
    """Abstract base class for all entity operators.

    Operators remove entities of one kind from the system and check ahead
    of time whether a given entity can be removed at all.

    Attributes:
        dry_run: If True, only simulate removals without executing them.

    Example:
        >>> operator = UserOperator(dry_run=True)
        >>> if operator.is_available():
        ...     results = operator.remove(["olduser"])
        ...     for result in results:
        ...         print(f"{result.action.name}: {result.success}")
    """

    def __init__(self, dry_run: bool = False) -> None:
        """Initialize the operator.

        Args:
            dry_run: If True, only simulate actions without executing them.
        """
        self._dry_run = dry_run

    @property
    def dry_run(self) -> bool:
        """Check if operator is in dry-run mode."""
        return self._dry_run

    @property
    @abstractmethod
    def kind(self) -> EntityKind:
        """Return the entity kind this operator removes."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the removal tooling is available on the system.

        Returns:
            True if the operator can be used, False otherwise.
        """

    @abstractmethod
    def exists(self, name: str) -> bool:
        """Check whether an entity is still present on the system.

        Args:
            name: Entity name to look up.
        """

    @abstractmethod
    def check_removable(self, entity: Entity) -> None:
        """Check, without changing anything, that an entity can be removed.

        Args:
            entity: Entity that would be removed.

        Raises:
            MarkAbsentError: If the entity cannot be removed by this operator.
        """

    @abstractmethod
    def remove(self, names: list[str]) -> list[PurgeActionResult]:
        """Remove one or more entities by name.

        Args:
            names: Entity names to remove.

        Returns:
            List of PurgeActionResult, one per name.

        Raises:
            RuntimeError: If the removal tooling is not available.
        """

    def execute(self, actions: list[PurgeAction]) -> list[PurgeActionResult]:
        """Execute a list of purge actions.

        No-op actions are reported as successful without being executed.
        Results come back in action order.

        Args:
            actions: Purge actions for this operator's kind.

        Returns:
            List of PurgeActionResult for each action.

        Raises:
            RuntimeError: If the removal tooling is not available.
            ValueError: If an action's kind doesn't match this operator.
        """
        for action in actions:
            if action.kind != self.kind:
                msg = (
                    f"Action kind {action.kind.value} doesn't match "
                    f"operator kind {self.kind.value}"
                )
                raise ValueError(msg)

        live = [action for action in actions if not action.noop]
        removed: list[PurgeActionResult] = []
        if live:
            removed = self.remove([a.name for a in live])
            if len(removed) != len(live):
                msg = f"Expected {len(live)} removal results, got {len(removed)}"
                raise ValueError(msg)

        # Live results are matched to actions by position, names may repeat
        live_results = iter(removed)
        results: list[PurgeActionResult] = []
        for action in actions:
            if action.noop:
                results.append(
                    PurgeActionResult(action=action, success=True, message="noop: not applied")
                )
                continue

            result = next(live_results)
            results.append(
                PurgeActionResult(
                    action=action,
                    success=result.success,
                    message=result.message,
                    error=result.error,
                    dry_run=result.dry_run,
                )
            )
        return results
