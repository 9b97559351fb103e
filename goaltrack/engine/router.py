"""Goal HTTP router — read/write surface over the goal store."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query

from goaltrack.auth import verify_api_key
from goaltrack.config import settings
from goaltrack.db import get_blob_store, get_store
from goaltrack.engine import insights, preferences
from goaltrack.engine.categories import get_category, list_categories
from goaltrack.engine.connector import BlobStore
from goaltrack.engine.models import (
    CategoryStats,
    CheckInCreate,
    Dashboard,
    Goal,
    GoalCreate,
    GoalUpdate,
    RecentActivity,
    ReorderRequest,
    Stats,
    ThemeUpdate,
)
from goaltrack.engine.priority import total_days
from goaltrack.engine.store import GoalStore

router = APIRouter(tags=["goals"], dependencies=[Depends(verify_api_key)])


def _require_goal(goal: Goal | None, goal_id: str) -> Goal:
    if goal is None:
        raise HTTPException(status_code=404, detail=f"Unknown goal: {goal_id}")
    return goal


# ---------------------------------------------------------------------------
# /goals
# ---------------------------------------------------------------------------


@router.get("/goals", response_model=list[Goal])
async def goals_list(store: GoalStore = Depends(get_store)) -> list[Goal]:
    return store.goals


@router.post("/goals", response_model=Goal, status_code=201)
async def goal_create(body: GoalCreate, store: GoalStore = Depends(get_store)) -> Goal:
    return store.add_goal(body)


@router.get("/goals/active", response_model=Goal | None)
async def goal_active(store: GoalStore = Depends(get_store)) -> Goal | None:
    return store.active_goal


@router.post("/goals/reorder", response_model=list[Goal])
async def goals_reorder(body: ReorderRequest, store: GoalStore = Depends(get_store)) -> list[Goal]:
    return store.reorder_goals(body.from_index, body.to_index)


@router.get("/goals/{goal_id}", response_model=Goal)
async def goal_detail(goal_id: str, store: GoalStore = Depends(get_store)) -> Goal:
    return _require_goal(store.get_goal(goal_id), goal_id)


@router.get("/goals/{goal_id}/progress")
async def goal_progress(goal_id: str, store: GoalStore = Depends(get_store)) -> dict:
    goal = _require_goal(store.get_goal(goal_id), goal_id)
    now = datetime.now(timezone.utc)
    return {
        "goalId": goal.id,
        "totalDays": total_days(goal),
        "daysRemaining": insights.days_remaining(goal.deadline, now),
        "timelineProgress": insights.timeline_progress(goal, now),
        "completedDays": goal.completed_days,
        "latestTargetPct": insights.latest_target_pct(goal),
    }


@router.patch("/goals/{goal_id}", response_model=Goal)
async def goal_update(goal_id: str, body: GoalUpdate, store: GoalStore = Depends(get_store)) -> Goal:
    return _require_goal(store.update_goal(goal_id, body), goal_id)


@router.delete("/goals/{goal_id}")
async def goal_delete(goal_id: str, store: GoalStore = Depends(get_store)) -> dict:
    if not store.delete_goal(goal_id):
        raise HTTPException(status_code=404, detail=f"Unknown goal: {goal_id}")
    return {"deleted": goal_id}


@router.post("/goals/{goal_id}/activate", response_model=Goal)
async def goal_activate(goal_id: str, store: GoalStore = Depends(get_store)) -> Goal:
    return _require_goal(store.set_active_goal(goal_id), goal_id)


@router.post("/goals/{goal_id}/checkins", response_model=Goal, status_code=201)
async def goal_check_in(goal_id: str, body: CheckInCreate, store: GoalStore = Depends(get_store)) -> Goal:
    return _require_goal(store.add_check_in(goal_id, body), goal_id)


# ---------------------------------------------------------------------------
# Aggregates & insights
# ---------------------------------------------------------------------------


@router.get("/stats", response_model=Stats)
async def stats(store: GoalStore = Depends(get_store)) -> Stats:
    return store.get_total_stats()


@router.get("/dashboard", response_model=Dashboard)
async def dashboard(store: GoalStore = Depends(get_store)) -> Dashboard:
    return Dashboard(
        goals=store.goals,
        active_goal=store.active_goal,
        stats=store.get_total_stats(),
        loading=store.loading,
    )


@router.get("/categories")
async def categories_list() -> list[dict]:
    return [{"name": c.name, "color": c.color, "icon": c.icon} for c in list_categories()]


@router.get("/categories/{name}")
async def category_detail(name: str) -> dict:
    category = get_category(name)
    if category is None:
        raise HTTPException(status_code=404, detail=f"Unknown category: {name}")
    return {"name": category.name, "color": category.color, "icon": category.icon}


@router.get("/insights/overview")
async def insights_overview(store: GoalStore = Depends(get_store)) -> dict:
    goals = store.goals
    return {
        "overallProgress": insights.overall_progress(goals),
        "categories": [c.model_dump(mode="json", by_alias=True) for c in insights.category_breakdown(goals)],
    }


@router.get("/insights/categories", response_model=list[CategoryStats])
async def insights_categories(store: GoalStore = Depends(get_store)) -> list[CategoryStats]:
    return insights.category_breakdown(store.goals)


@router.get("/insights/recent", response_model=list[RecentActivity])
async def insights_recent(
    store: GoalStore = Depends(get_store),
    limit: int | None = Query(default=None, ge=1, description="Number of check-ins to return"),
) -> list[RecentActivity]:
    return insights.recent_activity(store.goals, limit or settings.goals_recent_activity_limit)


# ---------------------------------------------------------------------------
# /preferences
# ---------------------------------------------------------------------------


@router.get("/preferences/theme")
async def theme_get(blob_store: BlobStore = Depends(get_blob_store)) -> dict:
    theme = await preferences.load_theme(blob_store)
    return {"theme": theme.value}


@router.put("/preferences/theme")
async def theme_set(body: ThemeUpdate, blob_store: BlobStore = Depends(get_blob_store)) -> dict:
    theme = await preferences.save_theme(blob_store, body.theme)
    return {"theme": theme.value}


# ---------------------------------------------------------------------------
# /data
# ---------------------------------------------------------------------------


@router.delete("/data")
async def data_clear(
    store: GoalStore = Depends(get_store),
    blob_store: BlobStore = Depends(get_blob_store),
) -> dict:
    """Wipe every goal, check-in and the theme preference."""
    await store.clear()
    await preferences.clear_theme(blob_store)
    return {"cleared": True}
