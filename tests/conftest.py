"""Shared test fixtures."""

import pytest
from httpx import ASGITransport, AsyncClient

from gesedels.config import Settings
from gesedels.server import create_app
from gesedels.stores import InMemoryDatabase, SQLiteDatabase

# Mock database pairs, keyed as they are stored on disk.
MOCK_PAIRS = {
    b"0000:alpha": b"Alpha.\n",
    b"0000:bravo": b"Bravo.\n",
}


def make_database(kind, tmp_path):
    if kind == "memory":
        return InMemoryDatabase()
    return SQLiteDatabase(str(tmp_path / "test.db"))


@pytest.fixture(params=["memory", "sqlite"])
async def empty_db(request, tmp_path):
    database = make_database(request.param, tmp_path)
    yield database
    await database.close()


@pytest.fixture(params=["memory", "sqlite"])
async def db(request, tmp_path):
    """A database of either backend, populated with MOCK_PAIRS."""
    database = make_database(request.param, tmp_path)
    async with database.update() as tx:
        buck = await tx.create_bucket_if_not_exists("main")
        for pkey, pval in MOCK_PAIRS.items():
            await buck.put(pkey, pval)
    yield database
    await database.close()


@pytest.fixture
def settings():
    return Settings(addr="127.0.0.1:8080", path=":memory:")


@pytest.fixture
async def client(db, settings):
    app = create_app(settings, database=db)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
