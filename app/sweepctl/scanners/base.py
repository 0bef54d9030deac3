"""Abstract base class for entity scanners.

This module defines the Scanner interface that all live-system
inspectors must implement.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator

from sweepctl.models.entity import Entity, EntityKind


class Scanner(ABC):
    """Abstract base class for all entity scanners.

    Scanners enumerate the entities of one kind that currently exist on
    the system. Numeric ids are left to each entity's resolver.

    Example:
        >>> scanner = UserScanner()
        >>> if scanner.is_available():
        ...     for entity in scanner.scan():
        ...         print(entity.name)
    """

    @property
    @abstractmethod
    def kind(self) -> EntityKind:
        """Return the entity kind this scanner enumerates."""

    @abstractmethod
    def scan(self) -> Iterator[Entity]:
        """Scan and yield all entities of this kind.

        Yields:
            Entity instances in enumeration order.

        Raises:
            RuntimeError: If the system database cannot be queried.
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this scanner can query the system.

        Returns:
            True if the scanner can be used, False otherwise.
        """

    def count(self) -> int:
        """Count entities of this kind."""
        return sum(1 for _ in self.scan())
