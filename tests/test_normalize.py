"""Tests for date and number normalization."""

from datetime import date, datetime

import pytest

from weight_dashboard.services.normalize import (
    format_fixed,
    normalize_date,
    normalize_int,
    normalize_number,
    round_half_up,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Date(2026,0,8)", "2026-01-08"),
        ("Date(2025,11,31)", "2025-12-31"),
        ("Date(2026,0,8,7,30,0)", "2026-01-08"),
        ("2026/1/8", "2026-01-08"),
        ("1/8", "2026-01-08"),
        ("12/31", "2026-12-31"),
        (date(2026, 2, 3), "2026-02-03"),
        (datetime(2026, 2, 3, 23, 59), "2026-02-03"),
        ("2026-01-08", "2026-01-08"),
        (" 2026-01-08 ", "2026-01-08"),
    ],
)
def test_normalize_date_supported_shapes(raw: object, expected: str) -> None:
    assert normalize_date(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [None, "", "   ", "yesterday", "2/30", "Date(2026,12,1)", 45000, True, "8"],
)
def test_normalize_date_rejects_unparseable(raw: object) -> None:
    assert normalize_date(raw) is None


def test_normalize_date_partial_uses_fallback_year() -> None:
    assert normalize_date("3/4", fallback_year=2025) == "2025-03-04"


@pytest.mark.parametrize(
    "raw", ["Date(2026,0,8)", "2026/1/8", "1/8", date(2026, 1, 8), "2026-01-08"]
)
def test_normalize_date_is_idempotent(raw: object) -> None:
    once = normalize_date(raw)
    assert normalize_date(once) == once


def test_normalize_number_distinguishes_absent_from_zero() -> None:
    assert normalize_number(0) == 0
    assert normalize_number("0") == 0
    assert normalize_number("") is None
    assert normalize_number(None) is None
    assert normalize_number("abc") is None


def test_normalize_number_parses_values() -> None:
    assert normalize_number("101.5") == 101.5
    assert normalize_number(" 7 ") == 7
    assert normalize_number(12) == 12.0
    assert normalize_number(float("nan")) is None
    assert normalize_number(False) is None


def test_normalize_int_rounds() -> None:
    assert normalize_int("8000") == 8000
    assert normalize_int(7999.5) == 8000
    assert normalize_int("") is None


def test_round_half_up_matches_dashboard_rounding() -> None:
    assert round_half_up(2.5) == 3
    assert round_half_up(-2.5) == -2
    assert round_half_up(1.005 * 100) == 100
    assert round_half_up(100.456, 2) == 100.46
    assert round_half_up(-5.0, 1) == -5.0


def test_format_fixed() -> None:
    assert format_fixed(-4.1946, 1) == "-4.2"
    assert format_fixed(0.25, 1) == "0.3"
    assert format_fixed(0, 1) == "0.0"
