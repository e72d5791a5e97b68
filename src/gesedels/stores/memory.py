"""InMemoryDatabase — zero-config, dict-backed database for development and testing."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from gesedels.exceptions import TxNotWritableError
from gesedels.stores.base import Bucket, Database, Transaction


class InMemoryBucket(Bucket):
    def __init__(self, data: dict[bytes, bytes], tx: InMemoryTransaction) -> None:
        self._data = data
        self._tx = tx

    async def get(self, key: bytes) -> bytes | None:
        return self._data.get(key)

    async def put(self, key: bytes, value: bytes) -> None:
        if not self._tx.writable:
            raise TxNotWritableError("put")
        self._data[key] = value

    async def delete(self, key: bytes) -> None:
        if not self._tx.writable:
            raise TxNotWritableError("delete")
        self._data.pop(key, None)

    async def keys(self, prefix: bytes = b"") -> list[bytes]:
        return sorted(k for k in self._data if k.startswith(prefix))


class InMemoryTransaction(Transaction):
    def __init__(self, buckets: dict[str, dict[bytes, bytes]], writable: bool) -> None:
        self._buckets = buckets
        self.writable = writable

    async def bucket(self, name: str) -> Bucket | None:
        data = self._buckets.get(name)
        if data is None:
            return None
        return InMemoryBucket(data, self)

    async def create_bucket_if_not_exists(self, name: str) -> Bucket:
        if not self.writable:
            raise TxNotWritableError("create_bucket")
        return InMemoryBucket(self._buckets.setdefault(name, {}), self)


class InMemoryDatabase(Database):
    """In-memory database using nested dicts.  Data is lost on process exit.

    Writers are serialized by a lock and operate on a copy of the live
    state, which replaces it only on commit.  Readers hold on to whatever
    state was live when they started.
    """

    def __init__(self) -> None:
        self._buckets: dict[str, dict[bytes, bytes]] = {}
        self._write_lock = asyncio.Lock()

    @asynccontextmanager
    async def update(self) -> AsyncIterator[Transaction]:
        async with self._write_lock:
            draft = {name: dict(data) for name, data in self._buckets.items()}
            yield InMemoryTransaction(draft, writable=True)
            self._buckets = draft

    @asynccontextmanager
    async def view(self) -> AsyncIterator[Transaction]:
        yield InMemoryTransaction(self._buckets, writable=False)

    async def close(self) -> None:
        self._buckets = {}
