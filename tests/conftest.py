"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import date

import httpx
import pytest

from weight_dashboard.adapters.json_source import JsonSource
from weight_dashboard.adapters.sheets_client import SheetRows, SheetsClient
from weight_dashboard.config import AppConfig
from weight_dashboard.containers import AppContainer
from weight_dashboard.domain.daily_log import DailyLogEntry
from weight_dashboard.domain.meals import MealEntry, MealsByDate, MealSlot
from weight_dashboard.services.cache import InMemoryDashboardCache
from weight_dashboard.services.dashboard import DashboardService
from weight_dashboard.services.loader import DataLoader

TODAY = date(2026, 1, 15)


@dataclass
class FakeSheetsClient(SheetsClient):
    """In-memory sheets keyed by name; unknown sheets fail like a 404."""

    sheets: dict[str, SheetRows] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)

    async def fetch_sheet(self, sheet_name: str) -> SheetRows:
        self.calls.append(sheet_name)
        if sheet_name not in self.sheets:
            request = httpx.Request("GET", f"https://sheets.test/{sheet_name}")
            response = httpx.Response(404, request=request)
            raise httpx.HTTPStatusError(
                "not found", request=request, response=response
            )
        return self.sheets[sheet_name]


@dataclass
class StaticJsonSource(JsonSource):
    """JSON source returning a fixed payload or raising a fixed error."""

    payload: object = None
    error: Exception | None = None
    loads: int = 0

    async def load(self) -> object:
        self.loads += 1
        if self.error is not None:
            raise self.error
        return self.payload


def entry(day: str, **values: object) -> DailyLogEntry:
    """Build a daily log entry with only the given measurements."""
    return DailyLogEntry(date=day, **values)  # type: ignore[arg-type]


def meals_for(*days: str, protein: float = 30, fat: float = 10, carbs: float = 80):
    """One breakfast item per day with the given macros."""
    meals: MealsByDate = {}
    for day in days:
        meals[day] = {
            MealSlot.BREAKFAST: [
                MealEntry(
                    name="rice bowl",
                    calories=540,
                    protein=protein,
                    fat=fat,
                    carbs=carbs,
                )
            ]
        }
    return meals


INPUT_ROWS: SheetRows = [
    ["date", "weight", "waist", "steps", "calories", "notes"],
    ["Date(2026,0,12)", 101.2, 98, 8000, 2500, ""],
    ["Date(2026,0,13)", 100.8, "", 10400, 2900, "Breakfast: oats (300kcal)"],
    ["1/14", 100.6, 97.5, 6500, 2450, ""],
    ["", 99, "", "", "", "template row"],
    ["Date(2026,0,15)", 100.1, 97, "", "", ""],
]

SETTINGS_ROWS: SheetRows = [
    ["key", "value"],
    ["target_weight", 88],
    ["start_weight", "110"],
    ["goals.protein", 180],
]

MEALS_JSON: dict[str, object] = {
    "2026-01-13": {
        "breakfast": [
            {"name": "oats", "calories": 300, "protein": 12, "fat": 6, "carbs": 50}
        ],
        "dinner": [
            {"name": "chicken", "calories": 600, "protein": 60, "fat": 20, "carbs": 40}
        ],
        "exercise": [{"name": "weights", "calories": -200}],
    },
    "2026-01-14": {
        "lunch": [
            {"name": "curry", "calories": 900, "protein": 30, "fat": 35, "carbs": 110}
        ]
    },
}

SNAPSHOT_JSON: dict[str, object] = {
    "settings": {"target_weight": 85, "goals": {"calories": 2400}},
    "daily_log": [
        {"date": "2026-01-13", "weight": 100.8, "steps": 9000, "protein": 150},
        {"date": "1/14", "weight": 100.4, "calories_intake": 2300},
        {"date": "", "weight": 99},
    ],
    "meals": {
        "2026-01-14": {"lunch": [{"name": "soba", "calories": 500, "protein": 20}]}
    },
    "goal_history": [
        {
            "date": "2026-01-08",
            "title": "Start",
            "note": "",
            "calories": 2800,
            "protein": 195,
            "fat": 58,
            "carbs": 325,
        },
        {
            "date": "2026-01-19",
            "title": "Cut",
            "note": "Lower calories",
            "calories": 2600,
            "protein": 195,
            "fat": 58,
            "carbs": 325,
            "current": True,
        },
    ],
    "plan": {"current_phase": "Preparation", "guidelines": ["Walk daily"]},
}


@pytest.fixture
def config() -> AppConfig:
    return AppConfig(sheet_id="sheet-123", meals_path=None)


@pytest.fixture
def sheets_client() -> FakeSheetsClient:
    return FakeSheetsClient(
        sheets={"Input": INPUT_ROWS, "settings": SETTINGS_ROWS}
    )


@pytest.fixture
def loader(sheets_client: FakeSheetsClient) -> DataLoader:
    return DataLoader(
        sheets_client=sheets_client,
        snapshot_source=StaticJsonSource(payload=SNAPSHOT_JSON),
        meals_source=StaticJsonSource(payload=MEALS_JSON),
    )


@pytest.fixture
def dashboard_service(loader: DataLoader) -> DashboardService:
    return DashboardService(loader=loader, cache=InMemoryDashboardCache())


@pytest.fixture
def container(
    config: AppConfig,
    sheets_client: FakeSheetsClient,
    dashboard_service: DashboardService,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        config=config,
        sheets_client=sheets_client,
        dashboard_service=dashboard_service,
        today=lambda: TODAY,
        close_resources=close_resources,
    )
