"""Entity models for live system users and groups.

An Entity is a named object discovered on the running system. Its numeric
id is resolved lazily through a callable, because the lookup can be
expensive or can fail, and many decisions never need it.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from sweepctl.core.errors import EntityLookupError


class EntityKind(Enum):
    """Kinds of purgeable entities.

    Attributes:
        USER: Local or NSS-provided user account (numeric id is the uid).
        GROUP: Local or NSS-provided group (numeric id is the gid).
    """

    USER = "user"
    GROUP = "group"


@dataclass(slots=True)
class Entity:
    """A live, possibly undeclared object on the system.

    The id resolver is called at most once; both the resolved id and a
    lookup failure are memoized for the lifetime of the entity.

    Attributes:
        name: Entity name (e.g., 'alice', 'docker').
        kind: Kind of the entity.
        id_resolver: Callable returning the numeric id on demand.
    """

    name: str
    kind: EntityKind
    id_resolver: Callable[[], int] = field(repr=False, compare=False)
    _id: int | None = field(default=None, init=False, repr=False, compare=False)
    _error: EntityLookupError | None = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Validate entity data after initialization."""
        if not self.name:
            msg = "Entity name cannot be empty"
            raise ValueError(msg)

    @classmethod
    def with_id(cls, name: str, kind: EntityKind, ident: int) -> Entity:
        """Create an entity whose id is already known."""
        return cls(name=name, kind=kind, id_resolver=lambda: ident)

    @property
    def is_resolved(self) -> bool:
        """Check if the id lookup has already been attempted successfully."""
        return self._id is not None

    @property
    def resolved_id(self) -> int | None:
        """The memoized id if it has been resolved, without triggering a lookup."""
        return self._id

    def resolve_id(self) -> int:
        """Return the numeric id, resolving it on first use.

        Returns:
            The entity's uid or gid.

        Raises:
            EntityLookupError: If the resolver fails or returns a non-integer.
        """
        if self._id is not None:
            return self._id
        if self._error is not None:
            raise self._error

        try:
            value = self.id_resolver()
        except (LookupError, ValueError, OSError) as e:
            self._error = EntityLookupError(
                f"Cannot resolve id of {self.kind.value} '{self.name}': {e}"
            )
            raise self._error from e

        if isinstance(value, bool) or not isinstance(value, int):
            self._error = EntityLookupError(
                f"Resolved id of {self.kind.value} '{self.name}' is not an integer: {value!r}"
            )
            raise self._error

        self._id = value
        return value
