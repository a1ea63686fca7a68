"""Tests for configuration."""

import pytest

from weight_dashboard.config import AppConfig, parse_data_source


def test_config_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SHEET_ID", "sheet-from-env")
    monkeypatch.setenv("FALLBACK_YEAR", "2027")

    config = AppConfig()

    assert config.sheet_id == "sheet-from-env"
    assert config.fallback_year == 2027
    assert config.input_sheet_name == "Input"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(None, "sheets"), ("", "sheets"), ("local", "local"), (" Sheets ", "sheets")],
)
def test_parse_data_source(raw: str | None, expected: str) -> None:
    assert parse_data_source(raw) == expected


def test_parse_data_source_default() -> None:
    assert parse_data_source(None, default="local") == "local"


def test_parse_data_source_rejects_unknown() -> None:
    with pytest.raises(ValueError, match="Unknown data source"):
        parse_data_source("csv")
