"""Pair storage — transactional CRUD for user/name pairs in the main bucket.

Every function runs exactly one transaction against the database it is
handed.  Missing pairs are reported through return values; database
failures propagate to the caller untouched.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from gesedels.sanitise import pair_key, pair_value

if TYPE_CHECKING:
    from gesedels.stores.base import Database

MAIN_BUCKET = "main"


async def delete_pair(db: Database, user: str, name: str) -> None:
    """Delete an existing pair.  No-op if the pair or bucket does not exist."""
    async with db.update() as tx:
        if (buck := await tx.bucket(MAIN_BUCKET)) is not None:
            await buck.delete(pair_key(user, name))


async def get_pair(db: Database, user: str, name: str) -> tuple[str, bool]:
    """Return the value of a pair and a flag indicating if the pair exists."""
    async with db.view() as tx:
        if (buck := await tx.bucket(MAIN_BUCKET)) is None:
            return "", False

        data = await buck.get(pair_key(user, name))
        if data is None:
            return "", False
        return data.decode(), True


async def list_pairs(db: Database, user: str) -> list[str]:
    """Return the sorted names of every pair stored for *user*."""
    prefix = pair_key(user, "")
    async with db.view() as tx:
        if (buck := await tx.bucket(MAIN_BUCKET)) is None:
            return []

        keys = await buck.keys(prefix)
    return [key[len(prefix) :].decode() for key in keys]


async def set_pair(db: Database, user: str, name: str, value: str) -> None:
    """Set the value of a new or existing pair, creating the bucket if needed."""
    async with db.update() as tx:
        buck = await tx.create_bucket_if_not_exists(MAIN_BUCKET)
        await buck.put(pair_key(user, name), pair_value(value))
