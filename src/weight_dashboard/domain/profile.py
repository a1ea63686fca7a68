"""Domain models for dashboard settings and goals."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Goals:
    """Daily nutrition targets."""

    calories: float = 2600
    calories_before_change_date: float = 2800
    protein: float = 195
    fat: float = 58
    carbs: float = 325
    pfc_ratio: str = "3:2:5"


@dataclass(frozen=True)
class DashboardSettings:
    """Body profile and targets resolved once per data load."""

    target_weight: float = 90
    target_steps: int = 10000
    start_weight: float = 119.2
    start_date: str = "2026-01-08"
    height: float = 184
    age: int = 30
    gender: str = "male"
    basal_metabolism: float = 2200
    calorie_change_date: str | None = "2026-01-19"
    goals: Goals = field(default_factory=Goals)


@dataclass(frozen=True)
class GoalHistoryEntry:
    """Immutable record of a goal change."""

    date: str
    title: str
    note: str
    calories: float
    protein: float
    fat: float
    carbs: float
    current: bool = False


@dataclass(frozen=True)
class GoalTimelineItem:
    """Goal history entry with deltas against the previous entry."""

    entry: GoalHistoryEntry
    calories_delta: float | None
    protein_delta: float | None
    fat_delta: float | None
    carbs_delta: float | None


@dataclass(frozen=True)
class Plan:
    """Current diet plan shown next to the goals."""

    current_phase: str
    target_date: str | None
    description: str
    guidelines: tuple[str, ...] = ()
