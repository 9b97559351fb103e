"""Shared fixtures for the test suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from goaltrack.db import get_blob_store, get_store
from goaltrack.engine.models import CheckIn, Goal, Mood
from goaltrack.engine.store import GoalStore
from goaltrack.main import app

# Frozen clock for every store under test. Far enough ahead that deadlines
# built from it always pass the future-deadline check on GoalCreate.
NOW = datetime(2099, 6, 1, 12, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Fake blob store (no real database needed)
# ---------------------------------------------------------------------------

class FakeBlobStore:
    """In-memory stand-in for SqlBlobStore."""

    def __init__(self, data: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(data or {})
        self.writes: list[tuple[str, str]] = []

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value
        self.writes.append((key, value))

    async def delete(self, key: str) -> None:
        self.data.pop(key, None)


class FailingBlobStore(FakeBlobStore):
    """Every read and write fails with an I/O error."""

    async def get(self, key: str) -> str | None:
        raise OSError("storage unavailable")

    async def set(self, key: str, value: str) -> None:
        raise OSError("storage unavailable")

    async def delete(self, key: str) -> None:
        raise OSError("storage unavailable")


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

def make_goal(days: float = 30, **overrides: Any) -> Goal:
    """Goal created at NOW with a deadline `days` later."""
    created_at = overrides.pop("created_at", NOW)
    defaults: dict[str, Any] = dict(
        name="Read",
        category="Learning",
        deadline=created_at + timedelta(days=days),
        daily_target=10.0,
        unit="pages",
        created_at=created_at,
        priority=0.0,
    )
    defaults.update(overrides)
    return Goal(**defaults)


def make_check_in(goal_id: str, day: int, completed: bool, progress: float | None = None) -> CheckIn:
    """Check-in dated `day` days after NOW."""
    return CheckIn(
        goal_id=goal_id,
        date=NOW + timedelta(days=day),
        progress=progress if progress is not None else (10.0 if completed else 0.0),
        mood=Mood.good,
        difficulty=3,
        is_completed=completed,
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def blob_store():
    return FakeBlobStore()


@pytest.fixture()
def store(blob_store):
    """GoalStore over the fake blob store, loaded and frozen at NOW."""
    s = GoalStore(blob_store, clock=lambda: NOW)
    s._loading = False
    return s


@pytest.fixture()
def override_store(store, blob_store):
    """Override the FastAPI dependencies so no real DB is needed."""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    yield store
    app.dependency_overrides.clear()


@pytest.fixture()
async def client(override_store):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
