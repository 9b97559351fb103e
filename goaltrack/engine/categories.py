"""Hardcoded goal categories — configuration only."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Category:
    name: str
    color: str
    icon: str


CATEGORIES: dict[str, Category] = {
    "Fitness": Category(name="Fitness", color="#FF6B6B", icon="Dumbbell"),
    "Learning": Category(name="Learning", color="#4ECDC4", icon="Book"),
    "Career": Category(name="Career", color="#45B7D1", icon="Briefcase"),
    "Health": Category(name="Health", color="#96CEB4", icon="Heart"),
    "Habits": Category(name="Habits", color="#FFEAA7", icon="Repeat"),
    "Creative": Category(name="Creative", color="#DDA0DD", icon="Palette"),
}


def list_categories() -> list[Category]:
    return list(CATEGORIES.values())


def get_category(name: str) -> Category | None:
    return CATEGORIES.get(name)
