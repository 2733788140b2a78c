"""Tests for device-local key-value stores."""

from __future__ import annotations

import pytest

from findr.keyvalue.file import FileKeyValueStore
from findr.keyvalue.memory import MemoryKeyValueStore
from findr.protocols.keyvalue import KeyValueStore


@pytest.fixture(params=["memory", "file"])
def store(request, tmp_path):
    if request.param == "memory":
        return MemoryKeyValueStore()
    return FileKeyValueStore(tmp_path)


class TestKeyValue:
    """Shared behaviour."""

    async def test_missing_key(self, store) -> None:
        assert await store.get("user_data") is None

    async def test_set_get(self, store) -> None:
        await store.set("user_data", {"id": "u-1", "email": "a@b.c"})
        assert await store.get("user_data") == {"id": "u-1", "email": "a@b.c"}

    async def test_overwrite(self, store) -> None:
        await store.set("k", 1)
        await store.set("k", 2)
        assert await store.get("k") == 2

    async def test_delete(self, store) -> None:
        await store.set("k", 1)
        assert await store.delete("k") is True
        assert await store.get("k") is None
        assert await store.delete("k") is False

    async def test_keys(self, store) -> None:
        await store.set("registered_users", {})
        await store.set("user_data", {})
        assert sorted(await store.keys()) == ["registered_users", "user_data"]

    async def test_values_are_copies(self, store) -> None:
        value = {"a": [1]}
        await store.set("k", value)
        value["a"].append(2)
        assert await store.get("k") == {"a": [1]}

    def test_protocol(self, store) -> None:
        assert isinstance(store, KeyValueStore)


class TestFileKeyValueStore:
    """Persistence across instances."""

    async def test_survives_reopen(self, tmp_path) -> None:
        await FileKeyValueStore(tmp_path).set("user_data", {"id": "u-1"})
        assert await FileKeyValueStore(tmp_path).get("user_data") == {"id": "u-1"}

    async def test_namespaces_are_isolated(self, tmp_path) -> None:
        await FileKeyValueStore(tmp_path, namespace="a").set("k", 1)
        assert await FileKeyValueStore(tmp_path, namespace="b").get("k") is None

    async def test_corrupt_file_reads_as_missing(self, tmp_path) -> None:
        store = FileKeyValueStore(tmp_path)
        (tmp_path / "findr" / "user_data.json").write_text("{not json", encoding="utf-8")
        assert await store.get("user_data") is None
