"""Goal store — the mutable collection behind the consumer surface.

Every mutating operation replaces the whole list (copy-on-write), re-ranks
where the operation calls for it, auto-activates a goal when none is active,
then schedules a full-collection write to the blob store. The in-memory state
is authoritative as soon as the operation returns; write failures are logged
and never reach the caller.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable

from pydantic import ValidationError

from goaltrack.config import settings
from goaltrack.engine.checkins import apply_check_in
from goaltrack.engine.connector import BlobStore, dump_goals, load_goals
from goaltrack.engine.models import CheckInCreate, Goal, GoalCreate, GoalUpdate, Stats
from goaltrack.engine.priority import AUTO_PRIORITY_CEILING, calculate_priority, pinned_priority
from goaltrack.engine.ranking import rank_goals

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def total_stats(goals: list[Goal]) -> Stats:
    """Aggregate stats over a collection. Empty → all zeros."""
    total = len(goals)
    completed = sum(1 for g in goals if g.is_completed)
    return Stats(
        total_goals=total,
        completed_goals=completed,
        current_streak=max((g.current_streak for g in goals), default=0),
        best_streak=max((g.best_streak for g in goals), default=0),
        success_rate=(completed / total) * 100 if total > 0 else 0.0,
    )


class GoalStore:
    def __init__(
        self,
        blob_store: BlobStore,
        clock: Callable[[], datetime] = _utcnow,
        storage_key: str | None = None,
    ):
        self._blob_store = blob_store
        self._clock = clock
        self._storage_key = storage_key or settings.goals_storage_key
        self._goals: list[Goal] = []
        self._loading = True
        self._pending: set[asyncio.Task] = set()
        self._last_write: asyncio.Task | None = None

    # ------------------------------------------------------------------
    # Read surface
    # ------------------------------------------------------------------

    @property
    def goals(self) -> list[Goal]:
        return list(self._goals)

    @property
    def active_goal(self) -> Goal | None:
        return next((g for g in self._goals if g.is_active), None)

    @property
    def loading(self) -> bool:
        return self._loading

    def get_goal(self, goal_id: str) -> Goal | None:
        return next((g for g in self._goals if g.id == goal_id), None)

    def get_total_stats(self) -> Stats:
        return total_stats(self._goals)

    # ------------------------------------------------------------------
    # Load / flush
    # ------------------------------------------------------------------

    async def load(self) -> None:
        """Read the persisted collection once. On failure the collection stays empty."""
        try:
            raw = await self._blob_store.get(self._storage_key)
            if raw:
                self._goals = rank_goals(load_goals(raw), self._clock())
                if self._auto_activate():
                    self._persist()
        except ValidationError:
            logger.exception("Stored goal collection is malformed; starting empty")
        except Exception:
            logger.exception("Error loading goals")
        finally:
            self._loading = False

    async def flush(self) -> None:
        """Wait for every scheduled write to settle."""
        while self._pending:
            await asyncio.gather(*self._pending)

    # ------------------------------------------------------------------
    # Write surface
    # ------------------------------------------------------------------

    def add_goal(self, data: GoalCreate) -> Goal:
        now = self._clock()
        goal = Goal(
            name=data.name,
            description=data.description,
            category=data.category,
            deadline=data.deadline,
            daily_target=data.daily_target,
            unit=data.unit,
            created_at=now,
        )
        # Automatic priorities stay below the pin range
        priority = min(calculate_priority(goal, now), AUTO_PRIORITY_CEILING)
        goal = goal.model_copy(update={"priority": priority})
        self._commit(rank_goals([*self._goals, goal], now))
        return self.get_goal(goal.id)

    def update_goal(self, goal_id: str, data: GoalUpdate) -> Goal | None:
        """Merge the set fields into a goal. Derived stats are left as they are."""
        if self.get_goal(goal_id) is None:
            logger.debug("update_goal: unknown goal %s", goal_id)
            return None
        updates = data.model_dump(exclude_unset=True, exclude_none=True)
        goals = [g.model_copy(update=updates) if g.id == goal_id else g for g in self._goals]
        self._commit(rank_goals(goals, self._clock()))
        return self.get_goal(goal_id)

    def delete_goal(self, goal_id: str) -> bool:
        if self.get_goal(goal_id) is None:
            logger.debug("delete_goal: unknown goal %s", goal_id)
            return False
        self._commit([g for g in self._goals if g.id != goal_id])
        return True

    def set_active_goal(self, goal_id: str) -> Goal | None:
        """Activate one goal and deactivate every other."""
        if self.get_goal(goal_id) is None:
            logger.debug("set_active_goal: unknown goal %s, clearing activation", goal_id)
        goals = [g.model_copy(update={"is_active": g.id == goal_id}) for g in self._goals]
        self._commit(goals)
        return self.get_goal(goal_id)

    def reorder_goals(self, from_index: int, to_index: int) -> list[Goal]:
        """Move one goal, then pin the whole collection to the resulting order."""
        if not 0 <= from_index < len(self._goals):
            logger.debug("reorder_goals: index %d out of range", from_index)
            return self.goals
        goals = list(self._goals)
        moved = goals.pop(from_index)
        goals.insert(to_index, moved)
        self._commit(
            [g.model_copy(update={"priority": pinned_priority(i)}) for i, g in enumerate(goals)]
        )
        return self.goals

    def add_check_in(self, goal_id: str, data: CheckInCreate) -> Goal | None:
        if self.get_goal(goal_id) is None:
            logger.debug("add_check_in: unknown goal %s", goal_id)
            return None
        now = self._clock()
        goals = [apply_check_in(g, data, now) if g.id == goal_id else g for g in self._goals]
        self._commit(rank_goals(goals, now))
        return self.get_goal(goal_id)

    async def clear(self) -> None:
        """Drop every goal and remove the stored collection."""
        # Settle queued writes first so none lands after the delete
        await self.flush()
        self._goals = []
        try:
            await self._blob_store.delete(self._storage_key)
        except Exception:
            logger.exception("Error clearing goals")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _commit(self, goals: list[Goal]) -> None:
        self._goals = goals
        self._auto_activate()
        self._persist()

    def _auto_activate(self) -> bool:
        """Activate the top-ranked incomplete goal when nothing is active."""
        if not self._goals or any(g.is_active for g in self._goals):
            return False
        ranked = rank_goals(self._goals, self._clock())
        candidate = next((g for g in ranked if not g.is_completed and not g.is_active), None)
        if candidate is None:
            return False
        logger.info("Auto-activating goal %s (%s)", candidate.id, candidate.name)
        self._goals = [g.model_copy(update={"is_active": g.id == candidate.id}) for g in self._goals]
        return True

    def _persist(self) -> None:
        payload = dump_goals(self._goals)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(self._write(payload))
            return
        task = loop.create_task(self._write(payload, self._last_write))
        self._last_write = task
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _write(self, payload: str, previous: asyncio.Task | None = None) -> None:
        # Writes land in mutation order
        if previous is not None and not previous.done():
            await asyncio.wait([previous])
        try:
            await self._blob_store.set(self._storage_key, payload)
        except Exception:
            logger.exception("Error saving goals")
