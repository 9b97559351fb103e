"""Priority calculator — pure, deterministic for a fixed `now`.

Lower value = higher display priority. Automatic values live in [1, 999];
values >= PIN_THRESHOLD are manual pins assigned by reordering.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta

from goaltrack.engine.models import Goal

DAY = timedelta(days=1)

PIN_THRESHOLD = 1000
PIN_STEP = 1000
AUTO_PRIORITY_CEILING = PIN_THRESHOLD - 1

COMPLETED_PRIORITY = 10000
OVERDUE_PRIORITY = 1
WEEK_PRIORITY = 100
MONTH_PRIORITY = 500
WEEK_DAYS = 7
MONTH_DAYS = 30

STREAK_WEIGHT = 10
PROGRESS_WEIGHT = 50
MIN_PRIORITY = 1


def days_between(start: datetime, end: datetime) -> int:
    """Whole days from start to end, rounded up (negative when end is past)."""
    return math.ceil((end - start) / DAY)


def total_days(goal: Goal) -> int:
    """Span of the goal in days, createdAt → deadline."""
    return days_between(goal.created_at, goal.deadline)


def is_pinned(priority: float) -> bool:
    return priority >= PIN_THRESHOLD


def pinned_priority(position: int) -> int:
    """Manual priority for a zero-based position in a reordered list."""
    return (position + 1) * PIN_STEP


def _urgency_tier(days_remaining: int) -> float:
    if days_remaining <= WEEK_DAYS:
        return WEEK_PRIORITY
    if days_remaining <= MONTH_DAYS:
        return MONTH_PRIORITY
    return days_remaining


def calculate_priority(goal: Goal, now: datetime) -> float:
    """Compute the automatic rank for a goal.

    - completed goals → exactly 10000 (sink to the bottom)
    - overdue goals → exactly 1 (float to the top)
    - otherwise urgency tier (≤7d 100, ≤30d 500, else days left)
      minus streak momentum, plus a penalty for missing progress,
      floor-clamped to 1.
    """
    if goal.is_completed:
        return COMPLETED_PRIORITY

    days_remaining = days_between(now, goal.deadline)
    if days_remaining <= 0:
        return OVERDUE_PRIORITY

    span = total_days(goal)
    progress_ratio = goal.completed_days / span if span > 0 else 0.0

    priority = _urgency_tier(days_remaining)
    priority -= goal.current_streak * STREAK_WEIGHT
    priority += (1 - progress_ratio) * PROGRESS_WEIGHT
    return max(MIN_PRIORITY, priority)
