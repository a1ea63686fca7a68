"""Tests for the data loader."""

import asyncio

import pytest

from weight_dashboard.adapters.sheets_client import SheetParseError
from weight_dashboard.domain.meals import MealSlot
from weight_dashboard.services.loader import DataLoader, DataLoadError
from tests.conftest import (
    INPUT_ROWS,
    MEALS_JSON,
    SNAPSHOT_JSON,
    FakeSheetsClient,
    StaticJsonSource,
)


def test_load_from_sheets(loader: DataLoader, sheets_client: FakeSheetsClient) -> None:
    data = asyncio.run(loader.load("sheets"))

    assert data.source == "sheets"
    assert [entry.date for entry in data.daily_log] == [
        "2026-01-12",
        "2026-01-13",
        "2026-01-14",
        "2026-01-15",
    ]
    assert data.settings.target_weight == 88
    assert data.settings.goals.protein == 180
    assert set(data.meals) == {"2026-01-13", "2026-01-14"}
    assert sorted(sheets_client.calls) == ["Input", "settings"]


def test_missing_settings_sheet_uses_defaults() -> None:
    loader = DataLoader(
        sheets_client=FakeSheetsClient(sheets={"Input": INPUT_ROWS}),
        snapshot_source=StaticJsonSource(payload=SNAPSHOT_JSON),
    )

    data = asyncio.run(loader.load("sheets"))

    assert data.settings.target_weight == 90
    assert data.meals == {}


def test_missing_input_sheet_fails_the_load() -> None:
    loader = DataLoader(
        sheets_client=FakeSheetsClient(sheets={}),
        snapshot_source=StaticJsonSource(payload=SNAPSHOT_JSON),
    )

    with pytest.raises(DataLoadError, match="Failed to load sheet 'Input'"):
        asyncio.run(loader.load("sheets"))


def test_unparseable_input_sheet_fails_the_load() -> None:
    class BrokenSheets(FakeSheetsClient):
        async def fetch_sheet(self, sheet_name: str):
            raise SheetParseError("unexpected response")

    loader = DataLoader(
        sheets_client=BrokenSheets(),
        snapshot_source=StaticJsonSource(payload=SNAPSHOT_JSON),
    )

    with pytest.raises(DataLoadError, match="unexpected response"):
        asyncio.run(loader.load_from_sheets())


def test_meal_file_failure_is_not_fatal() -> None:
    loader = DataLoader(
        sheets_client=FakeSheetsClient(sheets={"Input": INPUT_ROWS}),
        snapshot_source=StaticJsonSource(payload=SNAPSHOT_JSON),
        meals_source=StaticJsonSource(error=OSError("no such file")),
    )

    data = asyncio.run(loader.load("sheets"))

    assert len(data.daily_log) == 4
    assert data.meals == {}


def test_load_local_snapshot(loader: DataLoader) -> None:
    data = asyncio.run(loader.load("local"))

    assert data.source == "local"
    assert data.settings.target_weight == 85
    assert data.settings.goals.calories == 2400
    assert [entry.date for entry in data.daily_log] == ["2026-01-13", "2026-01-14"]
    assert data.daily_log[0].protein == 150
    assert [goal.title for goal in data.goal_history] == ["Start", "Cut"]
    assert data.plan is not None
    assert data.plan.current_phase == "Preparation"


def test_load_local_overlays_meal_file(loader: DataLoader) -> None:
    data = asyncio.run(loader.load("local"))

    assert set(data.meals) == {"2026-01-13", "2026-01-14"}
    assert data.meals["2026-01-14"][MealSlot.LUNCH][0].name == "curry"


def test_load_local_keeps_snapshot_meals_without_meal_file() -> None:
    loader = DataLoader(
        sheets_client=FakeSheetsClient(),
        snapshot_source=StaticJsonSource(payload=SNAPSHOT_JSON),
    )

    data = asyncio.run(loader.load_local())

    assert data.meals["2026-01-14"][MealSlot.LUNCH][0].name == "soba"


def test_load_local_weekly_measurements() -> None:
    snapshot = {
        "daily_log": [],
        "weekly_measurements": [
            {"date": "1/10", "waist": 97, "body_fat": 28.5},
            {"date": "soon", "waist": 96},
        ],
    }
    loader = DataLoader(
        sheets_client=FakeSheetsClient(),
        snapshot_source=StaticJsonSource(payload=snapshot),
    )

    data = asyncio.run(loader.load_local())

    assert data.weekly_measurements == [
        {"date": "2026-01-10", "waist": 97, "body_fat": 28.5}
    ]
    assert data.settings.target_weight == 90
    assert data.goal_history == []
    assert data.plan is None


@pytest.mark.parametrize(
    "source",
    [
        StaticJsonSource(error=ValueError("Expecting value")),
        StaticJsonSource(error=FileNotFoundError("data/sample.json")),
        StaticJsonSource(payload=["not", "an", "object"]),
    ],
)
def test_load_local_failures(source: StaticJsonSource) -> None:
    loader = DataLoader(
        sheets_client=FakeSheetsClient(),
        snapshot_source=source,
        meals_source=StaticJsonSource(payload=MEALS_JSON),
    )

    with pytest.raises(DataLoadError, match="Failed to load local data"):
        asyncio.run(loader.load("local"))
