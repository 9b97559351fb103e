import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from goaltrack.config import settings
from goaltrack.db import async_session, engine
from goaltrack.engine.connector import SqlBlobStore
from goaltrack.engine.router import router as goals_router
from goaltrack.engine.store import GoalStore

logging.basicConfig(level=settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    blob_store = SqlBlobStore(async_session)
    await blob_store.ensure_schema()
    store = GoalStore(blob_store)
    app.state.blob_store = blob_store
    app.state.store = store
    await store.load()
    yield
    await store.flush()
    await engine.dispose()


app = FastAPI(title="GoalTrack", version="0.1.0", lifespan=lifespan)
app.include_router(goals_router)


@app.get("/")
async def root() -> dict:
    return {
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
        "goals": {
            "list": "/goals",
            "active": "/goals/active",
            "reorder": "/goals/reorder",
            "checkins": "/goals/{id}/checkins",
            "stats": "/stats",
            "dashboard": "/dashboard",
            "categories": "/categories",
            "insights_overview": "/insights/overview",
            "insights_categories": "/insights/categories",
            "insights_recent": "/insights/recent",
            "theme": "/preferences/theme",
            "clear_data": "/data",
        },
    }


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
