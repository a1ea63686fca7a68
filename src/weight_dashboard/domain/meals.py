"""Domain models for meal nutrition data."""

from dataclasses import dataclass
from enum import Enum


class MealSlot(Enum):
    """Meal slots of a day (single source of truth for slot keys)."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    SNACK = "snack"
    DINNER = "dinner"
    EXERCISE = "exercise"

    @property
    def is_exercise(self) -> bool:
        return self is MealSlot.EXERCISE


@dataclass(frozen=True)
class MealEntry:
    """A single food item, or an exercise item whose calories are burned."""

    name: str
    calories: float = 0
    protein: float = 0
    fat: float = 0
    carbs: float = 0


DayMeals = dict[MealSlot, list[MealEntry]]
MealsByDate = dict[str, DayMeals]


@dataclass(frozen=True)
class MacroTotals:
    """Aggregated macros for a day."""

    calories: float
    protein: float
    fat: float
    carbs: float
    exercise_calories: float = 0

    @property
    def net_calories(self) -> float:
        return self.calories - self.exercise_calories

    @property
    def has_macros(self) -> bool:
        return self.protein > 0 or self.fat > 0 or self.carbs > 0


@dataclass(frozen=True)
class SlotCalories:
    """Calorie total of one slot and its share of food calories."""

    slot: MealSlot
    calories: float
    percent: int | None
    items: tuple[str, ...]


@dataclass(frozen=True)
class NoteSection:
    """A meal slot recovered from free-text notes."""

    slot: MealSlot
    items: tuple[str, ...]
    calories: int | None
