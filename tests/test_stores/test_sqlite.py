"""Tests for SQLiteDatabase — file persistence and failure reporting."""

import aiosqlite
import pytest

from gesedels.exceptions import StoreError
from gesedels.pairs import get_pair, set_pair
from gesedels.stores import SQLiteDatabase


async def test_persists_across_reopen(tmp_path):
    path = str(tmp_path / "test.db")

    db = SQLiteDatabase(path)
    await set_pair(db, "0000", "alpha", "  Alpha.  ")
    await db.close()

    db = SQLiteDatabase(path)
    try:
        assert await get_pair(db, "0000", "alpha") == ("Alpha.\n", True)
    finally:
        await db.close()


async def test_creates_file(tmp_path):
    path = tmp_path / "new.db"
    db = SQLiteDatabase(str(path))
    try:
        await get_pair(db, "0000", "alpha")
    finally:
        await db.close()
    assert path.exists()


async def test_unopenable_path_raises_store_error(tmp_path):
    db = SQLiteDatabase(str(tmp_path / "missing" / "dir" / "test.db"))
    with pytest.raises(StoreError) as info:
        await get_pair(db, "0000", "alpha")
    assert info.value.operation == "open"


def test_rejects_memory_path():
    with pytest.raises(ValueError):
        SQLiteDatabase(":memory:")


async def test_close_is_idempotent(tmp_path):
    db = SQLiteDatabase(str(tmp_path / "test.db"))
    await set_pair(db, "0000", "alpha", "Alpha.")
    await db.close()
    await db.close()  # should not raise


def test_rejects_zero_readers(tmp_path):
    with pytest.raises(ValueError):
        SQLiteDatabase(str(tmp_path / "test.db"), readers=0)


async def test_failed_open_closes_connections(tmp_path, monkeypatch):
    real_connect = aiosqlite.connect
    real_close = aiosqlite.Connection.close
    opened, closed = [], []

    def connect_writer_only(*args, **kwargs):
        if opened:
            raise aiosqlite.OperationalError("unable to open database file")
        conn = real_connect(*args, **kwargs)
        opened.append(conn)
        return conn

    async def tracked_close(self):
        closed.append(self)
        await real_close(self)

    monkeypatch.setattr(aiosqlite, "connect", connect_writer_only)
    monkeypatch.setattr(aiosqlite.Connection, "close", tracked_close)

    db = SQLiteDatabase(str(tmp_path / "test.db"))
    with pytest.raises(StoreError) as info:
        await get_pair(db, "0000", "alpha")

    assert info.value.operation == "open"
    assert len(opened) == 1
    assert closed == opened


async def test_views_share_reader_pool(tmp_path):
    db = SQLiteDatabase(str(tmp_path / "test.db"), readers=1)
    try:
        await set_pair(db, "0000", "alpha", "Alpha.")
        for _ in range(3):
            assert await get_pair(db, "0000", "alpha") == ("Alpha.\n", True)
    finally:
        await db.close()
