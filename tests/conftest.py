"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from collections.abc import Callable
from datetime import UTC, datetime

import pytest
from sweepctl.models.entity import Entity, EntityKind
from sweepctl.models.manifest import (
    DeclaredEntry,
    Manifest,
    ManifestMeta,
    PurgeConfig,
    PurgeSettings,
    SystemConfig,
)


@pytest.fixture
def mock_passwd_output() -> str:
    """Sample getent passwd output for testing."""
    return """root:x:0:0:root:/root:/bin/bash
daemon:x:1:1:daemon:/usr/sbin:/usr/sbin/nologin
syslog:x:104:110::/home/syslog:/usr/sbin/nologin
alice:x:1000:1000:Alice,,,:/home/alice:/bin/bash
bob:x:1001:1001:Bob,,,:/home/bob:/bin/bash
contractor:x:2001:2001::/home/contractor:/bin/bash"""


@pytest.fixture
def mock_group_output() -> str:
    """Sample getent group output for testing."""
    return """root:x:0:
wheel:x:10:alice
adm:x:4:syslog,alice
docker:x:998:alice
alice:x:1000:
oldteam:x:1500:bob
projects:x:3001:alice,bob"""


@pytest.fixture
def mock_malformed_group_output() -> str:
    """Group output with a broken gid and a nameless line."""
    return """broken:x:notanumber:
:x:5000:
valid:x:4000:"""


@pytest.fixture
def make_entity() -> Callable[..., Entity]:
    """Factory for entities with a known id."""

    def _make(name: str, ident: int, kind: EntityKind = EntityKind.USER) -> Entity:
        return Entity.with_id(name, kind, ident)

    return _make


@pytest.fixture
def sample_manifest() -> Manifest:
    """Manifest declaring alice and docker, purging users and groups."""
    now = datetime.now(UTC)
    return Manifest(
        meta=ManifestMeta(version="1.0", created=now, updated=now),
        system=SystemConfig(name="test-machine"),
        users={"alice": DeclaredEntry(reason="Primary login")},
        groups={"alice": DeclaredEntry(), "docker": DeclaredEntry()},
        purge=PurgeConfig(
            user=PurgeSettings(purge=True, system_threshold=999),
            group=PurgeSettings(purge=True, exclude_ids="1500"),
        ),
    )
