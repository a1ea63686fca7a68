"""Loading of the daily log, settings and meal sources."""

import asyncio
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

import httpx

from weight_dashboard.adapters.json_source import JsonSource
from weight_dashboard.adapters.sheets_client import SheetParseError, SheetsClient
from weight_dashboard.domain.dashboard import DashboardData
from weight_dashboard.domain.meals import MealsByDate
from weight_dashboard.domain.profile import DashboardSettings
from weight_dashboard.services.normalize import DEFAULT_FALLBACK_YEAR, normalize_date
from weight_dashboard.services.parsing import (
    parse_daily_rows,
    parse_log_records,
    parse_meals,
)
from weight_dashboard.services.profile import (
    default_settings,
    parse_goal_history,
    parse_plan,
    resolve_settings,
    settings_from_mapping,
)

_logger = logging.getLogger(__name__)


class DataLoadError(RuntimeError):
    """Raised when the mandatory daily log source cannot be loaded."""


@dataclass
class DataLoader:
    """Fetches the sources of one dashboard load.

    Independent sources are fetched concurrently. Only the daily log is
    mandatory; settings and meals fall back to defaults.
    """

    sheets_client: SheetsClient
    snapshot_source: JsonSource
    meals_source: JsonSource | None = None
    input_sheet_name: str = "Input"
    settings_sheet_name: str = "settings"
    fallback_year: int = DEFAULT_FALLBACK_YEAR

    async def load(self, source: str) -> DashboardData:
        """Load from ``"sheets"`` or ``"local"``."""
        if source == "local":
            return await self.load_local()
        return await self.load_from_sheets()

    async def load_from_sheets(self) -> DashboardData:
        """Load the Input sheet, the settings sheet and the meal file."""
        rows, settings, meals = await asyncio.gather(
            self._fetch_input_rows(),
            self._fetch_settings(),
            self._fetch_meals(),
        )
        daily_log = parse_daily_rows(rows, self.fallback_year)
        _logger.info(
            "Loaded %s daily entries and %s meal days from sheets",
            len(daily_log),
            len(meals),
        )
        return DashboardData(
            settings=settings, daily_log=daily_log, meals=meals, source="sheets"
        )

    async def load_local(self) -> DashboardData:
        """Load the local JSON snapshot, overlaid with the meal file."""
        snapshot, side_meals = await asyncio.gather(
            self._fetch_snapshot(), self._fetch_meals()
        )
        raw_settings = snapshot.get("settings")
        settings = (
            settings_from_mapping(raw_settings)
            if isinstance(raw_settings, Mapping)
            else default_settings()
        )
        raw_log = snapshot.get("daily_log")
        daily_log = parse_log_records(
            raw_log if isinstance(raw_log, Sequence) else [], self.fallback_year
        )
        meals = parse_meals(snapshot.get("meals") or {}, self.fallback_year)
        meals.update(side_meals)
        _logger.info(
            "Loaded %s daily entries and %s meal days from snapshot",
            len(daily_log),
            len(meals),
        )
        return DashboardData(
            settings=settings,
            daily_log=daily_log,
            meals=meals,
            goal_history=parse_goal_history(snapshot.get("goal_history")),
            weekly_measurements=self._weekly_records(
                snapshot.get("weekly_measurements")
            ),
            plan=parse_plan(snapshot.get("plan")),
            source="local",
        )

    async def _fetch_input_rows(self) -> list[list[object]]:
        try:
            return await self.sheets_client.fetch_sheet(self.input_sheet_name)
        except (httpx.HTTPError, SheetParseError) as exc:
            raise DataLoadError(
                f"Failed to load sheet {self.input_sheet_name!r}: {exc}"
            ) from exc

    async def _fetch_settings(self) -> DashboardSettings:
        try:
            rows = await self.sheets_client.fetch_sheet(self.settings_sheet_name)
        except (httpx.HTTPError, SheetParseError) as exc:
            _logger.info(
                "Settings sheet %r unavailable, using defaults: %s",
                self.settings_sheet_name,
                exc,
            )
            return default_settings()
        return resolve_settings(rows)

    async def _fetch_meals(self) -> MealsByDate:
        if self.meals_source is None:
            return {}
        try:
            raw = await self.meals_source.load()
        except (OSError, ValueError, httpx.HTTPError) as exc:
            _logger.warning("Meal data unavailable: %s", exc)
            return {}
        return parse_meals(raw, self.fallback_year)

    async def _fetch_snapshot(self) -> Mapping[str, object]:
        try:
            snapshot = await self.snapshot_source.load()
        except (OSError, ValueError, httpx.HTTPError) as exc:
            raise DataLoadError(f"Failed to load local data: {exc}") from exc
        if not isinstance(snapshot, Mapping):
            raise DataLoadError("Failed to load local data: not a JSON object")
        return snapshot

    def _weekly_records(self, raw: object) -> list[dict[str, object]]:
        if not isinstance(raw, Sequence) or isinstance(raw, str):
            return []
        records = []
        for item in raw:
            if not isinstance(item, Mapping):
                continue
            day = normalize_date(item.get("date"), self.fallback_year)
            if day is None:
                continue
            records.append({**item, "date": day})
        return records
