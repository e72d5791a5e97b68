"""Database protocol — an ordered, byte-keyed store with atomic transactions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager


class Bucket(ABC):
    """A named partition of byte keys and values inside a transaction."""

    @abstractmethod
    async def get(self, key: bytes) -> bytes | None:
        """Return the stored value, or ``None`` if not found."""
        ...

    @abstractmethod
    async def put(self, key: bytes, value: bytes) -> None:
        """Create or overwrite a value."""
        ...

    @abstractmethod
    async def delete(self, key: bytes) -> None:
        """Delete a value.  No-op if the key does not exist."""
        ...

    @abstractmethod
    async def keys(self, prefix: bytes = b"") -> list[bytes]:
        """Return every key starting with *prefix* in ascending byte order."""
        ...


class Transaction(ABC):
    """A single atomic unit of work.  Read-only unless ``writable`` is set."""

    writable: bool

    @abstractmethod
    async def bucket(self, name: str) -> Bucket | None:
        """Return the named bucket, or ``None`` if it does not exist."""
        ...

    @abstractmethod
    async def create_bucket_if_not_exists(self, name: str) -> Bucket:
        """Return the named bucket, creating it first if needed."""
        ...


class Database(ABC):
    """Abstract base for all embedded store backends.

    Work happens inside transactions opened with ``update()`` (read-write)
    or ``view()`` (read-only)::

        async with db.update() as tx:
            buck = await tx.create_bucket_if_not_exists("main")
            await buck.put(b"key", b"value")

    An ``update()`` block commits when it exits normally and rolls back when
    it raises.  At most one ``update()`` runs at a time; ``view()`` blocks see
    a consistent snapshot unaffected by in-flight writes.
    """

    @abstractmethod
    def update(self) -> AbstractAsyncContextManager[Transaction]:
        """Open a read-write transaction."""
        ...

    @abstractmethod
    def view(self) -> AbstractAsyncContextManager[Transaction]:
        """Open a read-only transaction."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying resources."""
        ...
