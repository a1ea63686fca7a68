"""Parsers turning tabular sheets and JSON records into domain objects."""

import logging
from collections.abc import Mapping, Sequence

from weight_dashboard.domain.daily_log import DailyLogEntry
from weight_dashboard.domain.meals import DayMeals, MealEntry, MealsByDate, MealSlot
from weight_dashboard.services.normalize import (
    DEFAULT_FALLBACK_YEAR,
    normalize_date,
    normalize_int,
    normalize_number,
)

Cell = str | float | int | None
Row = Sequence[Cell]

# Input sheet: A=date, B=weight, C=waist, D=steps, E=calories, F=notes
_INPUT_COLUMNS = 6

_logger = logging.getLogger(__name__)


def parse_daily_rows(
    rows: Sequence[Row], fallback_year: int = DEFAULT_FALLBACK_YEAR
) -> list[DailyLogEntry]:
    """Parse the fixed-column Input sheet; row 0 is the header."""
    entries: list[DailyLogEntry] = []
    for row in rows[1:]:
        cells = list(row) + [None] * (_INPUT_COLUMNS - len(row))
        day = normalize_date(cells[0], fallback_year)
        if day is None:
            continue
        entries.append(
            DailyLogEntry(
                date=day,
                weight=normalize_number(cells[1]),
                waist=normalize_number(cells[2]),
                steps=normalize_int(cells[3]),
                calories_intake=normalize_number(cells[4]),
                notes=_text(cells[5]),
            )
        )
    return entries


def parse_named_rows(
    rows: Sequence[Row],
    text_fields: Sequence[str] = ("date", "notes"),
    fallback_year: int = DEFAULT_FALLBACK_YEAR,
) -> list[dict[str, object]]:
    """Parse a sheet whose header row names the fields.

    Missing text fields default to ``""`` and missing numeric fields to None.
    """
    if len(rows) < 2:  # noqa: PLR2004
        return []
    headers = [_text(header) for header in rows[0]]
    records: list[dict[str, object]] = []
    for row in rows[1:]:
        record: dict[str, object] = {}
        for index, header in enumerate(headers):
            value = row[index] if index < len(row) else None
            if header == "date":
                record[header] = normalize_date(value, fallback_year) or ""
            elif header in text_fields:
                record[header] = _text(value)
            else:
                record[header] = normalize_number(value)
        if "date" in record and not record["date"]:
            continue
        records.append(record)
    return records


def parse_log_records(
    records: Sequence[object], fallback_year: int = DEFAULT_FALLBACK_YEAR
) -> list[DailyLogEntry]:
    """Parse ``daily_log`` objects from a local JSON snapshot."""
    entries: list[DailyLogEntry] = []
    for record in records:
        if not isinstance(record, Mapping):
            continue
        day = normalize_date(record.get("date"), fallback_year)
        if day is None:
            continue
        entries.append(
            DailyLogEntry(
                date=day,
                weight=normalize_number(record.get("weight")),
                waist=normalize_number(record.get("waist")),
                steps=normalize_int(record.get("steps")),
                calories_intake=normalize_number(record.get("calories_intake")),
                notes=_text(record.get("notes")),
                protein=normalize_number(record.get("protein")),
                fat=normalize_number(record.get("fat")),
                carbs=normalize_number(record.get("carbs")),
            )
        )
    return entries


def parse_meals(
    raw: object, fallback_year: int = DEFAULT_FALLBACK_YEAR
) -> MealsByDate:
    """Parse the meal JSON (date -> slot -> items) into typed meals."""
    if not isinstance(raw, Mapping):
        _logger.warning("Meal data is not an object; ignoring it")
        return {}
    meals: MealsByDate = {}
    for raw_date, raw_day in raw.items():
        day = normalize_date(raw_date, fallback_year)
        if day is None or not isinstance(raw_day, Mapping):
            _logger.warning("Skipping meal data for unparseable date %r", raw_date)
            continue
        meals[day] = _parse_day_meals(raw_day)
    return meals


def _parse_day_meals(raw_day: Mapping[str, object]) -> DayMeals:
    day_meals: DayMeals = {}
    for key, raw_items in raw_day.items():
        try:
            slot = MealSlot(key)
        except ValueError:
            _logger.info("Ignoring unknown meal slot %r", key)
            continue
        if not isinstance(raw_items, Sequence) or isinstance(raw_items, str):
            continue
        day_meals[slot] = [
            _parse_meal_entry(item, slot)
            for item in raw_items
            if isinstance(item, Mapping)
        ]
    return day_meals


def _parse_meal_entry(item: Mapping[str, object], slot: MealSlot) -> MealEntry:
    calories = normalize_number(item.get("calories")) or 0.0
    if slot.is_exercise:
        calories = abs(calories)
    return MealEntry(
        name=_text(item.get("name")),
        calories=calories,
        protein=normalize_number(item.get("protein")) or 0.0,
        fat=normalize_number(item.get("fat")) or 0.0,
        carbs=normalize_number(item.get("carbs")) or 0.0,
    )


def _text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()
