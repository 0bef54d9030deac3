"""Manifest models for declarative user and group management.

This module defines the Pydantic models representing the manifest.toml
structure: which users and groups are declared, and how undeclared ones
may be purged.

Example manifest::

    [meta]
    created = 2026-01-01T00:00:00Z
    updated = 2026-01-01T00:00:00Z

    [system]
    name = "workstation"

    [users.alice]
    reason = "Primary login"

    [groups.docker]

    [purge.user]
    purge = true
    system_threshold = 999
    exclude_ids = "1500,2000..2100"

    [purge.group]
    purge = true
    only_ids = [3000, "3100..3199"]
    noop = true
"""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr

from sweepctl.models.entity import Entity, EntityKind

# Raw id specification as written in TOML (validated when policies are built).
# Strict scalars: TOML booleans and floats are never ids.
IdScalar = StrictInt | StrictStr
IdSpecValue = IdScalar | list[IdScalar | list[IdScalar]] | None


class ManifestMeta(BaseModel):
    """Metadata section of the manifest.

    Attributes:
        version: Manifest schema version (e.g., "1.0").
        created: Timestamp when manifest was first created.
        updated: Timestamp when manifest was last modified.
    """

    model_config = ConfigDict(extra="forbid")

    version: Annotated[str, Field(description="Manifest schema version")] = "1.0"
    created: Annotated[datetime, Field(description="Timestamp when manifest was created")]
    updated: Annotated[datetime, Field(description="Timestamp when manifest was last modified")]


class SystemConfig(BaseModel):
    """System configuration section of the manifest.

    Attributes:
        name: Machine hostname or identifier.
        description: Optional description of the machine/configuration.
    """

    model_config = ConfigDict(extra="forbid")

    name: Annotated[str, Field(description="Machine hostname or identifier")]
    description: Annotated[str | None, Field(description="Machine description")] = None


class DeclaredEntry(BaseModel):
    """Entry for a single declared user or group.

    Attributes:
        reason: Optional explanation for why this entity is managed.
    """

    model_config = ConfigDict(extra="forbid")

    reason: Annotated[str | None, Field(description="Reason for declaring")] = None


class PurgeSettings(BaseModel):
    """Purge settings for one entity kind.

    Attributes:
        purge: Whether undeclared entities of this kind are purged at all.
        system_threshold: Ids at or below this value are kept. True means
            500, False disables the rule, omitted uses the kind's default.
        only_ids: If set, only ids in this list/range may be purged.
        exclude_ids: Ids in this list/range are kept.
        noop: Report purges without applying them.
    """

    model_config = ConfigDict(extra="forbid")

    purge: Annotated[bool, Field(description="Purge undeclared entities")] = False
    system_threshold: Annotated[
        StrictBool | StrictInt | StrictStr | None,
        Field(description="Inclusive id limit protecting system entities"),
    ] = None
    only_ids: Annotated[IdSpecValue, Field(description="Only purge these ids")] = None
    exclude_ids: Annotated[IdSpecValue, Field(description="Never purge these ids")] = None
    noop: Annotated[bool, Field(description="Report purges without applying them")] = False


class PurgeConfig(BaseModel):
    """Purge section of the manifest, one table per entity kind.

    Attributes:
        user: Purge settings for user accounts.
        group: Purge settings for groups.
    """

    model_config = ConfigDict(extra="forbid")

    user: Annotated[PurgeSettings | None, Field(description="User purge settings")] = None
    group: Annotated[PurgeSettings | None, Field(description="Group purge settings")] = None


class Manifest(BaseModel):
    """Complete manifest representing desired user and group state.

    Attributes:
        meta: Metadata section with version and timestamps.
        system: System configuration with machine details.
        users: Declared user accounts.
        groups: Declared groups.
        purge: Purge settings per entity kind.
    """

    model_config = ConfigDict(extra="forbid")

    meta: Annotated[ManifestMeta, Field(description="Manifest metadata")]
    system: Annotated[SystemConfig, Field(description="System configuration")]
    users: Annotated[
        dict[str, DeclaredEntry],
        Field(default_factory=dict, description="Declared user accounts"),
    ]
    groups: Annotated[
        dict[str, DeclaredEntry],
        Field(default_factory=dict, description="Declared groups"),
    ]
    purge: Annotated[
        PurgeConfig,
        Field(default_factory=PurgeConfig, description="Purge configuration"),
    ]

    def get_declared(self, kind: EntityKind) -> dict[str, DeclaredEntry]:
        """Get the declared entities of a kind.

        Args:
            kind: Entity kind to look up.

        Returns:
            Dictionary of entity names to DeclaredEntry.
        """
        if kind == EntityKind.USER:
            return self.users
        return self.groups

    def is_declared(self, entity: Entity) -> bool:
        """Check if a live entity is declared in the manifest."""
        return entity.name in self.get_declared(entity.kind)

    def purge_settings(self, kind: EntityKind) -> PurgeSettings:
        """Get the purge settings for a kind.

        Returns:
            The configured settings, or defaults (purge disabled) if the
            kind has no [purge.<kind>] table.
        """
        settings = self.purge.user if kind == EntityKind.USER else self.purge.group
        return settings if settings is not None else PurgeSettings()

    @property
    def declared_count(self) -> int:
        """Total number of declared users and groups."""
        return len(self.users) + len(self.groups)
