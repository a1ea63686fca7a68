"""Meal aggregation shared by every consumer of meal data."""

import re
from collections.abc import Iterable

from weight_dashboard.domain.meals import (
    DayMeals,
    MacroTotals,
    MealsByDate,
    MealSlot,
    NoteSection,
    SlotCalories,
)
from weight_dashboard.domain.metrics import PfcRatio
from weight_dashboard.services.normalize import round_half_up

PROTEIN_KCAL_PER_G = 4
FAT_KCAL_PER_G = 9
CARBS_KCAL_PER_G = 4

_NOTE_LABELS: dict[MealSlot, tuple[str, ...]] = {
    MealSlot.BREAKFAST: ("breakfast", "朝食"),
    MealSlot.LUNCH: ("lunch", "昼食"),
    MealSlot.SNACK: ("snack", "間食"),
    MealSlot.DINNER: ("dinner", "夕食"),
    MealSlot.EXERCISE: ("exercise", "workout", "筋トレ"),
}
_NOTE_PATTERNS: list[tuple[MealSlot, re.Pattern[str]]] = [
    (slot, re.compile(rf"^(?:{'|'.join(labels)})[:：]?\s*(.+)", re.IGNORECASE))
    for slot, labels in _NOTE_LABELS.items()
]
_TRAILING_KCAL = re.compile(r"\((\d+)kcal[^)]*\)\s*$")


def sum_macros(day_meals: DayMeals) -> MacroTotals:
    """Sum every slot of a day; exercise calories are kept apart."""
    calories = protein = fat = carbs = exercise = 0.0
    for slot, items in day_meals.items():
        for item in items:
            if slot.is_exercise:
                exercise += abs(item.calories)
            else:
                calories += item.calories
            protein += item.protein
            fat += item.fat
            carbs += item.carbs
    return MacroTotals(
        calories=calories,
        protein=protein,
        fat=fat,
        carbs=carbs,
        exercise_calories=exercise,
    )


def macros_for_dates(
    meals_by_date: MealsByDate, dates: Iterable[str]
) -> MacroTotals | None:
    """Sum the meals of the given dates, or None when none has meal data."""
    found = [sum_macros(meals_by_date[day]) for day in dates if day in meals_by_date]
    if not found:
        return None
    return MacroTotals(
        calories=sum(totals.calories for totals in found),
        protein=sum(totals.protein for totals in found),
        fat=sum(totals.fat for totals in found),
        carbs=sum(totals.carbs for totals in found),
        exercise_calories=sum(totals.exercise_calories for totals in found),
    )


def pfc_ratio(totals: MacroTotals) -> PfcRatio:
    """Return each macro's share of macro calories as integer percent."""
    protein_kcal = totals.protein * PROTEIN_KCAL_PER_G
    fat_kcal = totals.fat * FAT_KCAL_PER_G
    carbs_kcal = totals.carbs * CARBS_KCAL_PER_G
    total_kcal = protein_kcal + fat_kcal + carbs_kcal
    if total_kcal <= 0:
        return PfcRatio()
    return PfcRatio(
        protein=int(round_half_up(protein_kcal / total_kcal * 100)),
        fat=int(round_half_up(fat_kcal / total_kcal * 100)),
        carbs=int(round_half_up(carbs_kcal / total_kcal * 100)),
    )


def meal_breakdown(day_meals: DayMeals) -> list[SlotCalories]:
    """Per-slot calories and each food slot's share of food calories."""
    slot_calories = {
        slot: sum(abs(item.calories) for item in day_meals[slot])
        for slot in MealSlot
        if day_meals.get(slot)
    }
    food_total = sum(
        calories for slot, calories in slot_calories.items() if not slot.is_exercise
    )
    breakdown: list[SlotCalories] = []
    for slot, calories in slot_calories.items():
        percent = None
        if not slot.is_exercise and food_total > 0 and calories > 0:
            percent = int(round_half_up(calories / food_total * 100))
        breakdown.append(
            SlotCalories(
                slot=slot,
                calories=calories,
                percent=percent,
                items=tuple(item.name for item in day_meals[slot]),
            )
        )
    return breakdown


def parse_meal_notes(text: str) -> list[NoteSection] | None:
    """Parse notes like ``Breakfast: rice, eggs (450kcal) / Lunch: ...``.

    Returns None when the notes carry no slot labels.
    """
    items: dict[MealSlot, list[str]] = {}
    calories: dict[MealSlot, int] = {}
    structured = False
    for part in (chunk.strip() for chunk in text.split("/")):
        if not part:
            continue
        for slot, pattern in _NOTE_PATTERNS:
            match = pattern.match(part)
            if not match:
                continue
            structured = True
            content = match.group(1).strip()
            kcal = _TRAILING_KCAL.search(content)
            if kcal:
                calories[slot] = int(kcal.group(1))
            items.setdefault(slot, []).extend(
                cleaned
                for cleaned in (
                    _TRAILING_KCAL.sub("", piece.strip()).strip()
                    for piece in content.split(",")
                )
                if cleaned
            )
            break
    if not structured:
        return None
    return [
        NoteSection(slot=slot, items=tuple(items[slot]), calories=calories.get(slot))
        for slot in MealSlot
        if items.get(slot)
    ]
