"""Tests for meal aggregation."""

from weight_dashboard.domain.meals import MacroTotals, MealSlot
from weight_dashboard.domain.metrics import PfcRatio
from weight_dashboard.services.meals import (
    macros_for_dates,
    meal_breakdown,
    parse_meal_notes,
    pfc_ratio,
    sum_macros,
)
from weight_dashboard.services.parsing import parse_meals
from tests.conftest import MEALS_JSON, meals_for


def test_sum_macros_keeps_exercise_apart() -> None:
    meals = parse_meals(MEALS_JSON)

    totals = sum_macros(meals["2026-01-13"])

    assert totals == MacroTotals(
        calories=900, protein=72, fat=26, carbs=90, exercise_calories=200
    )
    assert totals.net_calories == 700
    assert totals.has_macros


def test_macros_for_dates_sums_available_days() -> None:
    meals = parse_meals(MEALS_JSON)

    totals = macros_for_dates(meals, ["2026-01-13", "2026-01-14", "2026-01-15"])

    assert totals is not None
    assert totals.calories == 1800
    assert totals.protein == 102
    assert totals.exercise_calories == 200


def test_macros_for_dates_without_meal_data() -> None:
    assert macros_for_dates(parse_meals(MEALS_JSON), ["2026-01-20"]) is None
    assert macros_for_dates({}, []) is None


def test_pfc_ratio_percentages() -> None:
    ratio = pfc_ratio(MacroTotals(calories=0, protein=30, fat=10, carbs=80))

    assert ratio == PfcRatio(protein=23, fat=17, carbs=60)


def test_pfc_ratio_sums_close_to_hundred() -> None:
    totals = sum_macros(parse_meals(MEALS_JSON)["2026-01-13"])

    ratio = pfc_ratio(totals)

    assert ratio == PfcRatio(protein=33, fat=27, carbs=41)
    assert abs(ratio.protein + ratio.fat + ratio.carbs - 100) <= 1


def test_pfc_ratio_without_macros_is_zero() -> None:
    assert pfc_ratio(MacroTotals(calories=500, protein=0, fat=0, carbs=0)) == PfcRatio()


def test_meal_breakdown_percent_of_food_calories() -> None:
    breakdown = meal_breakdown(parse_meals(MEALS_JSON)["2026-01-13"])

    assert [row.slot for row in breakdown] == [
        MealSlot.BREAKFAST,
        MealSlot.DINNER,
        MealSlot.EXERCISE,
    ]
    assert [row.percent for row in breakdown] == [33, 67, None]
    assert breakdown[2].calories == 200
    assert breakdown[1].items == ("chicken",)


def test_meal_breakdown_single_slot() -> None:
    breakdown = meal_breakdown(meals_for("2026-01-10")["2026-01-10"])

    assert len(breakdown) == 1
    assert breakdown[0].percent == 100


def test_parse_meal_notes_sections() -> None:
    sections = parse_meal_notes("Breakfast: rice, eggs (450kcal) / Lunch: soba")

    assert sections is not None
    assert [section.slot for section in sections] == [
        MealSlot.BREAKFAST,
        MealSlot.LUNCH,
    ]
    assert sections[0].items == ("rice", "eggs")
    assert sections[0].calories == 450
    assert sections[1].items == ("soba",)
    assert sections[1].calories is None


def test_parse_meal_notes_japanese_labels() -> None:
    sections = parse_meal_notes("朝食：納豆ご飯 (500kcal) / 筋トレ: ベンチプレス")

    assert sections is not None
    assert sections[0].slot is MealSlot.BREAKFAST
    assert sections[0].items == ("納豆ご飯",)
    assert sections[0].calories == 500
    assert sections[1].slot is MealSlot.EXERCISE


def test_parse_meal_notes_unstructured() -> None:
    assert parse_meal_notes("felt great today") is None
    assert parse_meal_notes("") is None
