"""Check-in aggregator — folds a new check-in into a goal's derived stats.

Appends, then recomputes from the full check-in history. Earlier check-ins
are never edited, so their is_completed flags keep the daily target that was
in force when they were recorded.
"""

from __future__ import annotations

from datetime import datetime, timezone

from goaltrack.engine.models import CheckIn, CheckInCreate, Goal
from goaltrack.engine.priority import total_days


def build_check_in(goal: Goal, data: CheckInCreate, now: datetime | None = None) -> CheckIn:
    """Stamp a check-in input with id, date and completion against the current target."""
    return CheckIn(
        goal_id=goal.id,
        date=data.date or now or datetime.now(timezone.utc),
        progress=data.progress,
        mood=data.mood,
        difficulty=data.difficulty,
        notes=data.notes,
        is_completed=data.progress >= goal.daily_target,
    )


def current_streak(check_ins: list[CheckIn]) -> int:
    """Completed check-ins counted back from the most recent, up to the first miss."""
    streak = 0
    for check_in in sorted(check_ins, key=lambda c: c.date, reverse=True):
        if not check_in.is_completed:
            break
        streak += 1
    return streak


def apply_check_in(goal: Goal, data: CheckInCreate, now: datetime | None = None) -> Goal:
    """Return a copy of `goal` with the check-in appended and stats recomputed."""
    check_in = build_check_in(goal, data, now)
    check_ins = [*goal.check_ins, check_in]

    completed_days = sum(1 for c in check_ins if c.is_completed)
    streak = current_streak(check_ins)

    return goal.model_copy(
        update={
            "check_ins": check_ins,
            "completed_days": completed_days,
            "total_progress": sum(c.progress for c in check_ins),
            "current_streak": streak,
            "best_streak": max(goal.best_streak, streak),
            "is_completed": completed_days >= total_days(goal),
        }
    )
