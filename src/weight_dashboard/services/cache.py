"""Read-through cache for the last successfully loaded data."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

from weight_dashboard.domain.dashboard import DashboardData
from weight_dashboard.domain.meals import DayMeals


class DashboardCache(Protocol):
    """Cache interface holding the last loaded dashboard data."""

    @property
    def data(self) -> DashboardData | None:
        """Return the cached data, if any."""

    @property
    def loaded_at(self) -> datetime | None:
        """Return when the cached data was stored (UTC)."""

    def set(self, data: DashboardData) -> None:
        """Replace the cached data."""

    def get(self, day: str) -> DayMeals | None:
        """Return the cached meals for a date."""


@dataclass
class InMemoryDashboardCache(DashboardCache):
    """Process-local cache of the most recent load."""

    _data: DashboardData | None
    _loaded_at: datetime | None

    def __init__(self) -> None:
        self._data = None
        self._loaded_at = None

    @property
    def data(self) -> DashboardData | None:
        return self._data

    @property
    def loaded_at(self) -> datetime | None:
        return self._loaded_at

    def set(self, data: DashboardData) -> None:
        """Store a freshly loaded dataset."""
        self._data = data
        self._loaded_at = datetime.now(tz=UTC)

    def get(self, day: str) -> DayMeals | None:
        """Return meals for a date from the cached data."""
        if self._data is None:
            return None
        return self._data.meals.get(day)
