"""Goal / CheckIn entity model — Pydantic v2 models.

Field names are snake_case in Python and camelCase on the wire, matching the
collection format the mobile client keeps in local storage.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime | None) -> datetime | None:
    # Stored timestamps without an offset are read as UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


def _require_name(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("name must not be empty")
    return value


def _require_future(value: datetime) -> datetime:
    if value <= _utcnow():
        raise ValueError("deadline must be in the future")
    return value


class Mood(str, Enum):
    terrible = "terrible"
    bad = "bad"
    okay = "okay"
    good = "good"
    great = "great"


class ThemePreference(str, Enum):
    light = "light"
    dark = "dark"
    auto = "auto"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------


class CheckIn(CamelModel):
    """One day's logged progress. Immutable once recorded."""

    id: str = Field(default_factory=_new_id)
    goal_id: str
    date: UtcDatetime = Field(default_factory=_utcnow)
    progress: float = Field(ge=0)
    mood: Mood
    difficulty: int = Field(ge=1, le=5)
    notes: str | None = None
    is_completed: bool = False  # progress >= daily_target at submission time


class Goal(CamelModel):
    id: str = Field(default_factory=_new_id)
    name: str
    description: str | None = None
    category: str
    deadline: UtcDatetime
    daily_target: float
    unit: str
    created_at: UtcDatetime = Field(default_factory=_utcnow)
    is_active: bool = False
    priority: float = 0.0  # >= 1000 pinned, otherwise calculated
    check_ins: list[CheckIn] = Field(default_factory=list)

    # Derived, recomputed only when a check-in is recorded
    completed_days: int = 0
    current_streak: int = 0
    best_streak: int = 0
    total_progress: float = 0.0
    is_completed: bool = False


class Stats(CamelModel):
    total_goals: int = 0
    completed_goals: int = 0
    current_streak: int = 0
    best_streak: int = 0
    success_rate: float = 0.0  # 0–100


# ---------------------------------------------------------------------------
# Inputs (validated at the caller boundary; the store trusts them)
# ---------------------------------------------------------------------------


class GoalCreate(CamelModel):
    name: str
    description: str | None = None
    category: str
    deadline: UtcDatetime
    daily_target: float = Field(gt=0)
    unit: str

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        return _require_name(value)

    @field_validator("deadline")
    @classmethod
    def _deadline_in_future(cls, value: datetime) -> datetime:
        return _require_future(value)


class GoalUpdate(CamelModel):
    """Partial edit. Derived stats and activation are not editable here."""

    name: str | None = None
    description: str | None = None
    category: str | None = None
    deadline: UtcDatetime | None = None
    daily_target: float | None = Field(default=None, gt=0)
    unit: str | None = None
    priority: float | None = Field(default=None, ge=1)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str | None) -> str | None:
        return value if value is None else _require_name(value)

    @field_validator("deadline")
    @classmethod
    def _deadline_in_future(cls, value: datetime | None) -> datetime | None:
        return value if value is None else _require_future(value)


class CheckInCreate(CamelModel):
    date: UtcDatetime | None = None  # defaults to submission time
    progress: float = Field(ge=0)
    mood: Mood
    difficulty: int = Field(ge=1, le=5)
    notes: str | None = None


class ReorderRequest(CamelModel):
    from_index: int
    to_index: int


class ThemeUpdate(CamelModel):
    theme: ThemePreference


# ---------------------------------------------------------------------------
# Read views
# ---------------------------------------------------------------------------


class CategoryStats(CamelModel):
    name: str
    color: str
    icon: str
    completed: int = 0
    total: int = 0
    percentage: float = 0.0


class RecentActivity(CamelModel):
    check_in: CheckIn
    goal_name: str
    goal_category: str


class Dashboard(CamelModel):
    goals: list[Goal] = Field(default_factory=list)
    active_goal: Goal | None = None
    stats: Stats = Field(default_factory=Stats)
    loading: bool = False
