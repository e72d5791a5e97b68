"""Embedded database backends for pair storage."""

from gesedels.stores.base import Bucket, Database, Transaction
from gesedels.stores.memory import InMemoryDatabase
from gesedels.stores.sqlite import SQLiteDatabase


def open_database(path: str) -> Database:
    """Return the database backend for *path*.

    ``":memory:"`` gives an :class:`InMemoryDatabase`; anything else is a
    file path for :class:`SQLiteDatabase`.
    """
    if path == ":memory:":
        return InMemoryDatabase()
    return SQLiteDatabase(path)


__all__ = [
    "Bucket",
    "Database",
    "InMemoryDatabase",
    "SQLiteDatabase",
    "Transaction",
    "open_database",
]
