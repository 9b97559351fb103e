"""Goal ranking policy — single comparator over the whole collection.

Pinned goals (priority >= 1000) always precede unpinned ones and keep their
pin order; unpinned goals sort by freshly calculated priority.
"""

from __future__ import annotations

from datetime import datetime, timezone
from functools import cmp_to_key
from typing import Iterable

from goaltrack.engine.models import Goal
from goaltrack.engine.priority import calculate_priority, is_pinned


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def compare_goals(a: Goal, b: Goal, now: datetime) -> int:
    a_pinned = is_pinned(a.priority)
    b_pinned = is_pinned(b.priority)
    if a_pinned and b_pinned:
        return _sign(a.priority - b.priority)
    if a_pinned:
        return -1
    if b_pinned:
        return 1
    return _sign(calculate_priority(a, now) - calculate_priority(b, now))


def rank_goals(goals: Iterable[Goal], now: datetime | None = None) -> list[Goal]:
    """Return a new list in display order. Stable; `now` is fixed for the whole sort."""
    if now is None:
        now = datetime.now(timezone.utc)
    return sorted(goals, key=cmp_to_key(lambda a, b: compare_goals(a, b, now)))
