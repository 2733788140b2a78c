"""Shared fixtures.

Backends are faked with the in-memory implementations; anything that
must fail does so through ``UnreachableRowStore``.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from findr.core.exceptions import StorageError
from findr.keyvalue.memory import MemoryKeyValueStore
from findr.models.base import Origin
from findr.models.sighting import Sighting, SightingDraft
from findr.storage.memory import MemoryRowStore


class UnreachableRowStore:
    """RowStore whose every call fails like a dropped connection."""

    def __init__(self) -> None:
        self.calls = 0

    async def _fail(self, *args, **kwargs):
        self.calls += 1
        raise StorageError("connection refused")

    insert = update = delete = select = _fail

    async def initialize(self) -> None:
        pass

    async def close(self) -> None:
        pass


@pytest.fixture
def rows() -> MemoryRowStore:
    return MemoryRowStore()


@pytest.fixture
def unreachable() -> UnreachableRowStore:
    return UnreachableRowStore()


@pytest.fixture
def kv() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def draft() -> SightingDraft:
    return SightingDraft(user_id="u-1", name="Red Cardinal", type="Bird", latitude=40.7, longitude=-74.0)


@pytest.fixture
def make_sighting():
    """Factory for materialized sightings; ``days_ago`` shifts the timestamp."""
    counter = {"n": 0}

    def _make(
        user_id: str = "u-1",
        name: str = "Red Cardinal",
        type: str = "Bird",
        days_ago: int = 0,
        rarity: str | None = None,
        confidence: int = 0,
        is_animal: bool = False,
        origin: Origin = Origin.REMOTE,
        now: datetime | None = None,
    ) -> Sighting:
        counter["n"] += 1
        base = now or datetime(2025, 6, 15, 12, 0, tzinfo=UTC)
        return Sighting(
            id=f"s-{counter['n']}",
            user_id=user_id,
            name=name,
            type=type,
            latitude=40.7,
            longitude=-74.0,
            timestamp=base - timedelta(days=days_ago),
            rarity=rarity,
            confidence=confidence,
            is_animal=is_animal,
            origin=origin,
        )

    return _make
