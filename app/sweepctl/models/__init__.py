"""Data models for sweepctl.

This module exports the entity, decision, action and manifest models.
"""

from sweepctl.models.action import PurgeAction, PurgeActionResult
from sweepctl.models.decision import DecisionType, KeepReason, PurgeDecision
from sweepctl.models.entity import Entity, EntityKind
from sweepctl.models.manifest import (
    DeclaredEntry,
    Manifest,
    ManifestMeta,
    PurgeSettings,
    SystemConfig,
)

__all__ = [
    "DecisionType",
    "DeclaredEntry",
    "Entity",
    "EntityKind",
    "KeepReason",
    "Manifest",
    "ManifestMeta",
    "PurgeAction",
    "PurgeActionResult",
    "PurgeDecision",
    "PurgeSettings",
    "SystemConfig",
]
