"""Shared fixtures for spacecube tests.

Provides a local filesystem object store with a ready bucket, a transfer
engine on top of it, and a fault-injecting store for abort-on-failure tests.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from spacecube.core.result import ErrorKind, Result
from spacecube.storage import LocalFSObjectStore
from spacecube.transfer import TransferEngine

BUCKET = "b"


class FaultyStore(LocalFSObjectStore):
    """LocalFSObjectStore that records calls and fails on chosen keys.

    Attributes:
        calls: Every (operation, key) pair received, in order.
        fail_put_on_call: 1-based index of the put_object call that fails.
        fail_keys: Keys whose get/put/delete fails.
    """

    def __init__(self, base_path: Path) -> None:
        super().__init__(base_path)
        self.calls: list[tuple[str, str]] = []
        self.fail_put_on_call: int | None = None
        self.fail_keys: set[str] = set()
        self._puts = 0

    def _injected(self, key: str) -> Result[None]:
        return Result.fail(ErrorKind.BACKEND, f"InjectedFault: {key}", detail={"key": key})

    def put_object(self, bucket, key, data, content_type, public_read=False):  # type: ignore[no-untyped-def]
        self.calls.append(("put", key))
        self._puts += 1
        if key in self.fail_keys or self._puts == self.fail_put_on_call:
            return self._injected(key)
        return super().put_object(bucket, key, data, content_type, public_read)

    def get_object(self, bucket, key):  # type: ignore[no-untyped-def]
        self.calls.append(("get", key))
        if key in self.fail_keys:
            return self._injected(key)
        return super().get_object(bucket, key)

    def delete_object(self, bucket, key):  # type: ignore[no-untyped-def]
        self.calls.append(("delete", key))
        if key in self.fail_keys:
            return self._injected(key)
        return super().delete_object(bucket, key)

    def list_objects(self, bucket, prefix):  # type: ignore[no-untyped-def]
        self.calls.append(("list", prefix))
        return super().list_objects(bucket, prefix)


@pytest.fixture
def store(tmp_path: Path) -> LocalFSObjectStore:
    """Create a LocalFSObjectStore with bucket 'b'."""
    local_store = LocalFSObjectStore(tmp_path / "store")
    assert local_store.create_bucket(BUCKET).ok
    return local_store


@pytest.fixture
def faulty_store(tmp_path: Path) -> FaultyStore:
    """Create a FaultyStore with bucket 'b'."""
    local_store = FaultyStore(tmp_path / "faulty-store")
    assert local_store.create_bucket(BUCKET).ok
    return local_store


@pytest.fixture
def engine(store: LocalFSObjectStore) -> TransferEngine:
    """Create a TransferEngine on the local store."""
    return TransferEngine(store)


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """Create the tree a/1.txt="x", a/2/3.txt="y"."""
    root = tmp_path / "a"
    (root / "2").mkdir(parents=True)
    (root / "1.txt").write_text("x")
    (root / "2" / "3.txt").write_text("y")
    return root
