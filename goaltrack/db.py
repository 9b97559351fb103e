from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from goaltrack.config import settings
from goaltrack.engine.connector import BlobStore
from goaltrack.engine.store import GoalStore

_raw_url = settings.database_url

if _raw_url.startswith("sqlite:///"):
    _raw_url = _raw_url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)

engine = create_async_engine(_raw_url, pool_pre_ping=True)
async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


def get_blob_store(request: Request) -> BlobStore:
    return request.app.state.blob_store


def get_store(request: Request) -> GoalStore:
    return request.app.state.store
