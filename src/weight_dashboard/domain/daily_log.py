"""Domain models for daily log rows."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DailyLogEntry:
    """One calendar day of spreadsheet measurements.

    ``None`` means the value was not entered; zero is a real measurement.
    Macros are only filled from a local snapshot, never from the sheet.
    """

    date: str
    weight: float | None = None
    waist: float | None = None
    steps: int | None = None
    calories_intake: float | None = None
    notes: str = ""
    protein: float | None = None
    fat: float | None = None
    carbs: float | None = None
