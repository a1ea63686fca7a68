"""Result records of the metrics engine."""

from dataclasses import dataclass, field
from enum import Enum

from weight_dashboard.domain.profile import Goals


@dataclass(frozen=True)
class PfcRatio:
    """Calorie share of each macro in integer percent."""

    protein: int = 0
    fat: int = 0
    carbs: int = 0


@dataclass(frozen=True)
class WeeklyStats:
    """Averages over the trailing seven entries.

    Zero is the "no data" value here, unlike the rest of the engine.
    """

    avg_calories: int
    avg_weight: float
    pfc: PfcRatio
    goals: Goals


@dataclass(frozen=True)
class WeightChange:
    """Latest weight relative to the start and the target."""

    current: float
    change: float
    change_percent: str
    to_goal: float


@dataclass(frozen=True)
class WaistChange:
    """Latest waist relative to the first measurement."""

    current: float | None
    change: float | None


@dataclass(frozen=True)
class StepsSummary:
    """Latest steps and the weekly average."""

    current: int | None
    avg_steps: int | None
    target: int


@dataclass(frozen=True)
class LatestCalories:
    """Most recent calorie intake compared to the daily goal."""

    calories: float | None
    diff: float | None
    date: str | None


class BalanceStatus(Enum):
    """Classification of intake minus estimated burn."""

    DEFICIT = "deficit"
    SLIGHT_SURPLUS = "slight_surplus"
    SURPLUS = "surplus"


@dataclass(frozen=True)
class CalorieBalance:
    """Intake minus estimated burn for a day."""

    balance: float
    status: BalanceStatus


class MacroFlag(Enum):
    """Macro problems detected against the goals."""

    PROTEIN_DEFICIT = "protein deficit"
    FAT_EXCESS = "fat excess"
    CARBS_EXCESS = "carbs excess"


@dataclass(frozen=True)
class MacroVerdict:
    """Evaluation of a day's macros."""

    status: str
    text: str
    flags: tuple[MacroFlag, ...] = ()


class InsightStatus(Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    WARNING = "warning"
    NEGATIVE = "negative"


@dataclass(frozen=True)
class Insight:
    """A single insight card."""

    status: InsightStatus
    text: str


class SummaryKind(Enum):
    """Overall classification of a day's review."""

    CELEBRATORY = "celebratory"
    MIXED = "mixed"
    NEEDS_IMPROVEMENT = "needs_improvement"
    NO_DATA = "no_data"


@dataclass(frozen=True)
class InsightSummary:
    kind: SummaryKind
    text: str


@dataclass(frozen=True)
class InsightBundle:
    """Daily review of the reference day plus this morning's measurements."""

    reference_date: str
    summary: InsightSummary
    calories: Insight | None = None
    steps: Insight | None = None
    pfc: Insight | None = None
    weight: Insight | None = None
    waist: Insight | None = None
    improvements: list[str] = field(default_factory=list)
    positives: list[str] = field(default_factory=list)


class WarningKind(Enum):
    NO_DATA = "no_data"
    MISSING_FIELDS = "missing_fields"
    MISSING_MEALS = "missing_meals"


@dataclass(frozen=True)
class DataWarning:
    """A gap in the recent log."""

    date: str
    kind: WarningKind
    message: str
    missing_fields: tuple[str, ...] = ()
