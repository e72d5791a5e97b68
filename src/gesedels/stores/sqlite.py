"""SQLiteDatabase — durable, single-file database backend using aiosqlite."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import aiosqlite

from gesedels.exceptions import StoreError, TxNotWritableError
from gesedels.stores.base import Bucket, Database, Transaction

_CREATE_BUCKETS = """
CREATE TABLE IF NOT EXISTS buckets (
    name TEXT PRIMARY KEY
)
"""

_CREATE_PAIRS = """
CREATE TABLE IF NOT EXISTS pairs (
    bucket TEXT NOT NULL,
    key    BLOB NOT NULL,
    value  BLOB NOT NULL,
    PRIMARY KEY (bucket, key)
)
"""


async def _execute(
    db: aiosqlite.Connection,
    operation: str,
    sql: str,
    params: tuple[Any, ...] = (),
) -> aiosqlite.Cursor:
    try:
        return await db.execute(sql, params)
    except aiosqlite.Error as exc:
        raise StoreError(operation, str(exc)) from exc


class SQLiteBucket(Bucket):
    def __init__(self, name: str, tx: SQLiteTransaction) -> None:
        self._name = name
        self._tx = tx

    async def get(self, key: bytes) -> bytes | None:
        cursor = await _execute(
            self._tx.db,
            "get",
            "SELECT value FROM pairs WHERE bucket = ? AND key = ?",
            (self._name, key),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return bytes(row[0])

    async def put(self, key: bytes, value: bytes) -> None:
        if not self._tx.writable:
            raise TxNotWritableError("put")
        await _execute(
            self._tx.db,
            "put",
            "INSERT OR REPLACE INTO pairs (bucket, key, value) VALUES (?, ?, ?)",
            (self._name, key, value),
        )

    async def delete(self, key: bytes) -> None:
        if not self._tx.writable:
            raise TxNotWritableError("delete")
        await _execute(
            self._tx.db,
            "delete",
            "DELETE FROM pairs WHERE bucket = ? AND key = ?",
            (self._name, key),
        )

    async def keys(self, prefix: bytes = b"") -> list[bytes]:
        # BLOB comparison is memcmp, so ORDER BY key is byte order.
        if prefix:
            cursor = await _execute(
                self._tx.db,
                "keys",
                "SELECT key FROM pairs WHERE bucket = ? AND substr(key, 1, ?) = ? ORDER BY key",
                (self._name, len(prefix), prefix),
            )
        else:
            cursor = await _execute(
                self._tx.db,
                "keys",
                "SELECT key FROM pairs WHERE bucket = ? ORDER BY key",
                (self._name,),
            )
        rows = await cursor.fetchall()
        return [bytes(row[0]) for row in rows]


class SQLiteTransaction(Transaction):
    def __init__(self, db: aiosqlite.Connection, writable: bool) -> None:
        self.db = db
        self.writable = writable

    async def bucket(self, name: str) -> Bucket | None:
        cursor = await _execute(
            self.db,
            "bucket",
            "SELECT 1 FROM buckets WHERE name = ?",
            (name,),
        )
        if (await cursor.fetchone()) is None:
            return None
        return SQLiteBucket(name, self)

    async def create_bucket_if_not_exists(self, name: str) -> Bucket:
        if not self.writable:
            raise TxNotWritableError("create_bucket")
        await _execute(
            self.db,
            "create_bucket",
            "INSERT OR IGNORE INTO buckets (name) VALUES (?)",
            (name,),
        )
        return SQLiteBucket(name, self)


class SQLiteDatabase(Database):
    """Persistent database backed by a single SQLite file in WAL mode.

    A single writer connection serves ``update()`` under a lock with
    ``BEGIN IMMEDIATE``.  A pool of reader connections serves ``view()``,
    one transaction per connection, so views run side by side and WAL mode
    keeps each on a consistent snapshot while a write is in flight.

    Parameters:
        db_path: Path to the SQLite database file.  Created if missing.
        readers: Number of reader connections, i.e. concurrent views.
    """

    def __init__(self, db_path: str = "gesedels.db", readers: int = 4) -> None:
        if db_path == ":memory:":
            raise ValueError("SQLiteDatabase needs a file path; use InMemoryDatabase instead")
        if readers < 1:
            raise ValueError("SQLiteDatabase needs at least one reader connection")
        self._db_path = db_path
        self._reader_count = readers
        self._writer: aiosqlite.Connection | None = None
        self._readers: list[aiosqlite.Connection] = []
        self._idle_readers: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue()
        self._connect_lock = asyncio.Lock()
        self._write_lock = asyncio.Lock()

    async def _connect(self) -> aiosqlite.Connection:
        async with self._connect_lock:
            if self._writer is None:
                opened: list[aiosqlite.Connection] = []
                try:
                    writer = await aiosqlite.connect(self._db_path, isolation_level=None)
                    opened.append(writer)
                    await writer.execute("PRAGMA journal_mode=WAL")
                    await writer.execute(_CREATE_BUCKETS)
                    await writer.execute(_CREATE_PAIRS)
                    for _ in range(self._reader_count):
                        opened.append(await aiosqlite.connect(self._db_path, isolation_level=None))
                except aiosqlite.Error as exc:
                    for conn in opened:
                        await conn.close()
                    raise StoreError("open", str(exc)) from exc

                self._readers = opened[1:]
                self._idle_readers = asyncio.Queue()
                for reader in self._readers:
                    self._idle_readers.put_nowait(reader)
                self._writer = writer
            return self._writer

    async def close(self) -> None:
        if self._writer:
            await self._writer.close()
            self._writer = None
        for reader in self._readers:
            await reader.close()
        self._readers = []

    # ── Database protocol ────────────────────────────────────

    @asynccontextmanager
    async def update(self) -> AsyncIterator[Transaction]:
        writer = await self._connect()
        async with self._write_lock:
            await _execute(writer, "begin", "BEGIN IMMEDIATE")
            try:
                yield SQLiteTransaction(writer, writable=True)
                await _execute(writer, "commit", "COMMIT")
            except BaseException:
                if writer.in_transaction:
                    await _execute(writer, "rollback", "ROLLBACK")
                raise

    @asynccontextmanager
    async def view(self) -> AsyncIterator[Transaction]:
        await self._connect()
        idle = self._idle_readers
        reader = await idle.get()
        try:
            await _execute(reader, "begin", "BEGIN")
            try:
                yield SQLiteTransaction(reader, writable=False)
            finally:
                await _execute(reader, "rollback", "ROLLBACK")
        finally:
            idle.put_nowait(reader)
