"""Dashboard service: loads data and assembles the derived view."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from weight_dashboard.domain.daily_log import DailyLogEntry
from weight_dashboard.domain.dashboard import (
    ChartSeries,
    DashboardData,
    DashboardView,
    LogRow,
    MealDetail,
)
from weight_dashboard.domain.meals import MacroTotals, MealsByDate
from weight_dashboard.domain.metrics import DataWarning
from weight_dashboard.domain.profile import DashboardSettings
from weight_dashboard.services.cache import DashboardCache
from weight_dashboard.services.insights import (
    build_daily_insight,
    check_data_completeness,
)
from weight_dashboard.services.loader import DataLoader, DataLoadError
from weight_dashboard.services.meals import (
    meal_breakdown,
    parse_meal_notes,
    pfc_ratio,
    sum_macros,
)
from weight_dashboard.services.metrics import (
    DEFAULT_TARGET_STEPS,
    calorie_balance,
    estimated_burn,
    evaluate_macros,
    latest_calories,
    moving_average,
    sort_entries,
    steps_summary,
    waist_change,
    weekly_stats,
    weight_change,
)
from weight_dashboard.services.normalize import is_positive
from weight_dashboard.services.profile import calorie_target_for_date, goal_timeline

RECENT_LOG_LIMIT = 14

_logger = logging.getLogger(__name__)


@dataclass
class DashboardService:
    """Orchestrates loading, caching and metric assembly."""

    loader: DataLoader
    cache: DashboardCache
    default_source: str = "sheets"

    async def load(self, source: str | None = None) -> DashboardData:
        """Load fresh data; on failure the previously cached data is kept."""
        resolved = source or self.default_source
        try:
            data = await self.loader.load(resolved)
        except DataLoadError:
            _logger.exception("Dashboard load from %s failed", resolved)
            raise
        self.cache.set(data)
        return data

    async def get_data(self, source: str | None = None) -> DashboardData:
        """Return cached data, loading it on first use."""
        cached = self.cache.data
        if cached is not None and (source is None or cached.source == source):
            return cached
        return await self.load(source)

    def build_view(self, data: DashboardData, today: date) -> DashboardView:
        """Derive every dashboard metric from one load."""
        settings = data.settings
        entries = sort_entries(data.daily_log)
        recent = list(reversed(entries))[:RECENT_LOG_LIMIT]
        return DashboardView(
            series=_chart_series(entries, settings),
            weekly=weekly_stats(entries, settings, data.meals),
            weight_change=weight_change(entries, settings),
            waist_change=waist_change(entries),
            steps=steps_summary(entries, settings),
            latest_calories=latest_calories(entries, settings.goals),
            calorie_target_today=calorie_target_for_date(today.isoformat(), settings),
            recent_logs=[_log_row(entry, settings, data.meals) for entry in recent],
            insights=build_daily_insight(recent, data.meals, settings, today),
            warnings=check_data_completeness(entries, data.meals, today),
            goal_timeline=goal_timeline(data.goal_history),
            plan=data.plan,
            weekly_measurements=sorted(
                data.weekly_measurements, key=lambda record: str(record["date"])
            ),
        )

    def warnings(self, data: DashboardData, today: date) -> list[DataWarning]:
        """Return data-completeness warnings for ``today``."""
        return check_data_completeness(data.daily_log, data.meals, today)

    def meals_for_date(self, day: str) -> MealDetail | None:
        """Meal detail for a date, served from the cache.

        Falls back to the log entry's notes when no meal data exists.
        """
        data = self.cache.data
        if data is None:
            return None
        log = next((entry for entry in data.daily_log if entry.date == day), None)
        day_meals = self.cache.get(day)
        if day_meals:
            totals = sum_macros(day_meals)
            return MealDetail(
                date=day,
                totals=totals,
                pfc=pfc_ratio(totals) if totals.has_macros else None,
                breakdown=meal_breakdown(day_meals),
                notes=log.notes if log else "",
            )
        if log is None:
            return None
        totals = _totals_from_log(log)
        return MealDetail(
            date=day,
            totals=totals,
            pfc=pfc_ratio(totals) if totals and totals.has_macros else None,
            note_sections=parse_meal_notes(log.notes) or [],
            notes=log.notes,
        )


def _chart_series(
    entries: Sequence[DailyLogEntry], settings: DashboardSettings
) -> ChartSeries:
    waist_points = [entry for entry in entries if is_positive(entry.waist)]
    return ChartSeries(
        labels=[entry.date for entry in entries],
        weight=[
            entry.weight if is_positive(entry.weight) else None for entry in entries
        ],
        weight_moving_avg=moving_average(entries, "weight"),
        calories=[
            entry.calories_intake if is_positive(entry.calories_intake) else None
            for entry in entries
        ],
        steps=[entry.steps for entry in entries],
        waist_labels=[entry.date for entry in waist_points],
        waist=[entry.waist for entry in waist_points],
        target_weight=settings.target_weight,
        target_calories=settings.goals.calories,
        target_steps=settings.target_steps or DEFAULT_TARGET_STEPS,
    )


def _log_row(
    entry: DailyLogEntry, settings: DashboardSettings, meals_by_date: MealsByDate
) -> LogRow:
    macros = None
    pfc = None
    verdict = None
    day_meals = meals_by_date.get(entry.date)
    if day_meals:
        macros = sum_macros(day_meals)
        if macros.has_macros:
            pfc = pfc_ratio(macros)
            verdict = evaluate_macros(macros, settings.goals)
    weight = entry.weight if is_positive(entry.weight) else None
    burn = estimated_burn(weight, entry.steps, settings)
    return LogRow(
        entry=entry,
        macros=macros,
        pfc=pfc,
        verdict=verdict,
        estimated_burn=burn,
        balance=calorie_balance(entry.calories_intake, burn),
    )


def _totals_from_log(log: DailyLogEntry) -> MacroTotals | None:
    values = (log.calories_intake, log.protein, log.fat, log.carbs)
    if all(value is None for value in values):
        return None
    return MacroTotals(
        calories=log.calories_intake or 0,
        protein=log.protein or 0,
        fat=log.fat or 0,
        carbs=log.carbs or 0,
    )
