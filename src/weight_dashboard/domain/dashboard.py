"""Domain models for loaded data and the assembled dashboard view."""

from dataclasses import dataclass, field

from weight_dashboard.domain.daily_log import DailyLogEntry
from weight_dashboard.domain.meals import (
    MacroTotals,
    MealsByDate,
    NoteSection,
    SlotCalories,
)
from weight_dashboard.domain.metrics import (
    CalorieBalance,
    DataWarning,
    InsightBundle,
    LatestCalories,
    MacroVerdict,
    PfcRatio,
    StepsSummary,
    WaistChange,
    WeeklyStats,
    WeightChange,
)
from weight_dashboard.domain.profile import (
    DashboardSettings,
    GoalHistoryEntry,
    GoalTimelineItem,
    Plan,
)


@dataclass(frozen=True)
class DashboardData:
    """Everything one load produced, before any metric is derived."""

    settings: DashboardSettings
    daily_log: list[DailyLogEntry]
    meals: MealsByDate = field(default_factory=dict)
    goal_history: list[GoalHistoryEntry] = field(default_factory=list)
    weekly_measurements: list[dict[str, object]] = field(default_factory=list)
    plan: Plan | None = None
    source: str = "sheets"


@dataclass(frozen=True)
class ChartSeries:
    """Date-aligned series for the charts."""

    labels: list[str]
    weight: list[float | None]
    weight_moving_avg: list[float | None]
    calories: list[float | None]
    steps: list[int | None]
    waist_labels: list[str]
    waist: list[float]
    target_weight: float
    target_calories: float
    target_steps: int


@dataclass(frozen=True)
class LogRow:
    """One row of the recent log table."""

    entry: DailyLogEntry
    macros: MacroTotals | None
    pfc: PfcRatio | None
    verdict: MacroVerdict | None
    estimated_burn: int | None
    balance: CalorieBalance | None


@dataclass(frozen=True)
class DashboardView:
    """Derived metrics for one load."""

    series: ChartSeries
    weekly: WeeklyStats
    weight_change: WeightChange
    waist_change: WaistChange
    steps: StepsSummary
    latest_calories: LatestCalories
    calorie_target_today: float
    recent_logs: list[LogRow]
    insights: InsightBundle | None
    warnings: list[DataWarning]
    goal_timeline: list[GoalTimelineItem]
    plan: Plan | None
    weekly_measurements: list[dict[str, object]] = field(default_factory=list)


@dataclass(frozen=True)
class MealDetail:
    """Meal detail for one day, from meal data or parsed notes."""

    date: str
    totals: MacroTotals | None
    pfc: PfcRatio | None
    breakdown: list[SlotCalories] = field(default_factory=list)
    note_sections: list[NoteSection] = field(default_factory=list)
    notes: str = ""
