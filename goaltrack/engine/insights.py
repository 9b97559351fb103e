"""Pure insight helpers — math only, never raises."""

from __future__ import annotations

from datetime import datetime

from goaltrack.engine.categories import list_categories
from goaltrack.engine.models import CategoryStats, Goal, RecentActivity
from goaltrack.engine.priority import days_between, total_days


def days_remaining(deadline: datetime, now: datetime) -> int:
    """Whole days left until the deadline, never negative."""
    return max(0, days_between(now, deadline))


def timeline_progress(goal: Goal, now: datetime) -> float:
    """Fraction (0–1) of the goal's span that has elapsed."""
    span = total_days(goal)
    if span <= 0:
        return 0.0
    elapsed = span - days_remaining(goal.deadline, now)
    return max(0.0, min(1.0, elapsed / span))


def target_progress_pct(progress: float, daily_target: float) -> float:
    """How much of the daily target a progress value covers, capped at 100."""
    if daily_target <= 0:
        return 0.0
    return min(100.0, (progress / daily_target) * 100.0)


def latest_target_pct(goal: Goal) -> float | None:
    """Target coverage of the most recent check-in, None before the first one."""
    if not goal.check_ins:
        return None
    latest = max(goal.check_ins, key=lambda c: c.date)
    return target_progress_pct(latest.progress, goal.daily_target)


def overall_progress(goals: list[Goal]) -> float:
    """Share of goals completed (0–100). Empty input yields 0."""
    if not goals:
        return 0.0
    return sum(1 for g in goals if g.is_completed) / len(goals) * 100.0


def category_breakdown(goals: list[Goal]) -> list[CategoryStats]:
    """Completion per known category, in catalogue order.

    Categories without goals are omitted; goals outside the catalogue
    are not counted.
    """
    result: list[CategoryStats] = []
    for category in list_categories():
        in_category = [g for g in goals if g.category == category.name]
        if not in_category:
            continue
        completed = sum(1 for g in in_category if g.is_completed)
        result.append(
            CategoryStats(
                name=category.name,
                color=category.color,
                icon=category.icon,
                completed=completed,
                total=len(in_category),
                percentage=completed / len(in_category) * 100.0,
            )
        )
    return result


def recent_activity(goals: list[Goal], limit: int = 5) -> list[RecentActivity]:
    """Newest check-ins across all goals, most recent first."""
    entries = [
        RecentActivity(check_in=c, goal_name=g.name, goal_category=g.category)
        for g in goals
        for c in g.check_ins
    ]
    entries.sort(key=lambda e: e.check_in.date, reverse=True)
    return entries[:limit]
