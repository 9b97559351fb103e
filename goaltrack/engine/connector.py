"""Persistence connector — async key-value blob store over SQL.

One table, kv_store(key, value). The goal collection is a single JSON blob
overwritten on every mutation; the theme preference is a second key.
Deleting both keys wipes all user data.
No schema version is stored.
"""

from __future__ import annotations

from typing import Protocol

from pydantic import TypeAdapter
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from goaltrack.engine.models import Goal

_goals_adapter = TypeAdapter(list[Goal])


class BlobStore(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...

    async def delete(self, key: str) -> None: ...


class SqlBlobStore:
    """BlobStore backed by any SQLAlchemy async engine (SQLite by default)."""

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]):
        self._sessionmaker = sessionmaker

    async def ensure_schema(self) -> None:
        async with self._sessionmaker() as session:
            await session.execute(
                text("CREATE TABLE IF NOT EXISTS kv_store (key VARCHAR(255) PRIMARY KEY, value TEXT NOT NULL)")
            )
            await session.commit()

    async def get(self, key: str) -> str | None:
        """Return the stored blob, or None when the key was never written."""
        async with self._sessionmaker() as session:
            result = await session.execute(text("SELECT value FROM kv_store WHERE key = :key"), {"key": key})
            row = result.fetchone()
        if row is None:
            return None
        return row[0]

    async def set(self, key: str, value: str) -> None:
        query = (
            "INSERT INTO kv_store (key, value) VALUES (:key, :value) "
            "ON CONFLICT (key) DO UPDATE SET value = excluded.value"
        )
        async with self._sessionmaker() as session:
            await session.execute(text(query), {"key": key, "value": value})
            await session.commit()

    async def delete(self, key: str) -> None:
        async with self._sessionmaker() as session:
            await session.execute(text("DELETE FROM kv_store WHERE key = :key"), {"key": key})
            await session.commit()


def dump_goals(goals: list[Goal]) -> str:
    """Serialise the collection (camelCase keys, ISO-8601 timestamps)."""
    return _goals_adapter.dump_json(goals, by_alias=True).decode()


def load_goals(raw: str) -> list[Goal]:
    """Parse a stored collection. Raises pydantic.ValidationError on bad data."""
    return _goals_adapter.validate_json(raw)
