"""Pure metric computations over date-sorted daily log entries."""

from collections.abc import Sequence

from weight_dashboard.domain.daily_log import DailyLogEntry
from weight_dashboard.domain.meals import MacroTotals, MealsByDate
from weight_dashboard.domain.metrics import (
    BalanceStatus,
    CalorieBalance,
    LatestCalories,
    MacroFlag,
    MacroVerdict,
    PfcRatio,
    StepsSummary,
    WaistChange,
    WeeklyStats,
    WeightChange,
)
from weight_dashboard.domain.profile import DashboardSettings, Goals
from weight_dashboard.services.meals import macros_for_dates, pfc_ratio
from weight_dashboard.services.normalize import (
    format_fixed,
    is_positive,
    round_half_up,
)

WEEK = 7
DEFAULT_TARGET_STEPS = 10000

# Harris-Benedict (male) coefficients
BMR_BASE = 88.362
BMR_PER_KG = 13.397
BMR_PER_CM = 4.799
BMR_PER_YEAR = 5.677
SEDENTARY_FACTOR = 1.2
KCAL_PER_STEP = 0.045

SURPLUS_THRESHOLD = 300

PROTEIN_DEFICIT_LIMIT = -20
FAT_EXCESS_LIMIT = 20
CARBS_EXCESS_LIMIT = 50
IDEAL_PROTEIN_TOLERANCE = 20
IDEAL_FAT_TOLERANCE = 15


def sort_entries(entries: Sequence[DailyLogEntry]) -> list[DailyLogEntry]:
    """Return entries in ascending date order."""
    return sorted(entries, key=lambda entry: entry.date)


def moving_average(
    entries: Sequence[DailyLogEntry], field: str, window: int = WEEK
) -> list[float | None]:
    """Trailing average of positive values, index-aligned with ``entries``."""
    result: list[float | None] = []
    for index in range(len(entries)):
        start = max(0, index - window + 1)
        values = [
            value
            for value in (getattr(entry, field) for entry in entries[start : index + 1])
            if is_positive(value)
        ]
        if values:
            result.append(round_half_up(sum(values) / len(values), 2))
        else:
            result.append(None)
    return result


def weekly_stats(
    entries: Sequence[DailyLogEntry],
    settings: DashboardSettings,
    meals_by_date: MealsByDate,
) -> WeeklyStats:
    """Averages and PFC balance over the trailing seven entries."""
    last7 = list(entries[-WEEK:])

    calories = [e.calories_intake for e in last7 if is_positive(e.calories_intake)]
    avg_calories = (
        int(round_half_up(sum(calories) / len(calories))) if calories else 0
    )

    weights = [e.weight for e in last7 if is_positive(e.weight)]
    avg_weight = round_half_up(sum(weights) / len(weights), 1) if weights else 0

    totals = macros_for_dates(meals_by_date, (entry.date for entry in last7))
    pfc = pfc_ratio(totals) if totals is not None else PfcRatio()

    return WeeklyStats(
        avg_calories=avg_calories,
        avg_weight=avg_weight,
        pfc=pfc,
        goals=settings.goals,
    )


def weight_change(
    entries: Sequence[DailyLogEntry], settings: DashboardSettings
) -> WeightChange:
    """Latest positive weight against the start weight and the target.

    ``change_percent`` is always a one-decimal string, ``"0.0"`` when no
    weight has been logged, so callers never see a bare number there.
    """
    weights = [entry.weight for entry in entries if is_positive(entry.weight)]
    if not weights:
        return WeightChange(current=0, change=0, change_percent="0.0", to_goal=0)

    current = weights[-1]
    change = current - settings.start_weight
    if settings.start_weight:
        change_percent = format_fixed(change / settings.start_weight * 100, 1)
    else:
        change_percent = "0.0"
    return WeightChange(
        current=current,
        change=round_half_up(change, 1),
        change_percent=change_percent,
        to_goal=round_half_up(current - settings.target_weight, 1),
    )


def waist_change(entries: Sequence[DailyLogEntry]) -> WaistChange:
    """Latest positive waist against the first positive waist."""
    waists = [entry.waist for entry in entries if is_positive(entry.waist)]
    if not waists:
        return WaistChange(current=None, change=None)
    return WaistChange(
        current=waists[-1], change=round_half_up(waists[-1] - waists[0], 1)
    )


def steps_summary(
    entries: Sequence[DailyLogEntry], settings: DashboardSettings
) -> StepsSummary:
    """Latest step count (zero allowed) and the trailing weekly average."""
    with_steps = [entry.steps for entry in entries if entry.steps is not None]
    current = with_steps[-1] if with_steps else None

    week = [entry.steps for entry in entries[-WEEK:] if entry.steps is not None]
    avg_steps = int(round_half_up(sum(week) / len(week))) if week else None

    return StepsSummary(
        current=current,
        avg_steps=avg_steps,
        target=settings.target_steps or DEFAULT_TARGET_STEPS,
    )


def latest_calories(entries: Sequence[DailyLogEntry], goals: Goals) -> LatestCalories:
    """The most recent calorie intake, whatever its date, against the goal."""
    logged = [entry for entry in entries if entry.calories_intake is not None]
    if not logged:
        return LatestCalories(calories=None, diff=None, date=None)
    latest = logged[-1]
    return LatestCalories(
        calories=latest.calories_intake,
        diff=latest.calories_intake - goals.calories,
        date=latest.date,
    )


def estimated_burn(
    weight: float | None, steps: int | None, settings: DashboardSettings
) -> int | None:
    """Estimate daily energy expenditure from BMR and steps.

    Always uses the male coefficients; ``settings.gender`` is not consulted.
    """
    if weight is None:
        return None
    bmr = (
        BMR_BASE
        + BMR_PER_KG * weight
        + BMR_PER_CM * settings.height
        - BMR_PER_YEAR * settings.age
    )
    step_kcal = steps * KCAL_PER_STEP if steps is not None else 0
    return int(round_half_up(bmr * SEDENTARY_FACTOR + step_kcal))


def calorie_balance(
    calories_intake: float | None, burn: int | None
) -> CalorieBalance | None:
    """Intake minus burn; None unless both are known."""
    if not calories_intake or burn is None:
        return None
    balance = calories_intake - burn
    if balance < 0:
        status = BalanceStatus.DEFICIT
    elif balance > SURPLUS_THRESHOLD:
        status = BalanceStatus.SURPLUS
    else:
        status = BalanceStatus.SLIGHT_SURPLUS
    return CalorieBalance(balance=balance, status=status)


def evaluate_macros(
    grams: MacroTotals | None, goals: Goals | None
) -> MacroVerdict | None:
    """Compare a day's macro grams with the goals.

    A macro at zero grams counts as not logged. Returns None when any macro
    is missing or the day is neither ideal nor flagged.
    """
    if grams is None or goals is None:
        return None
    macros = (grams.protein, grams.fat, grams.carbs)
    if not all(is_positive(value) for value in macros):
        return None
    protein_delta = grams.protein - goals.protein
    fat_delta = grams.fat - goals.fat
    carbs_delta = grams.carbs - goals.carbs

    flags = macro_flags(protein_delta, fat_delta, carbs_delta)
    if (
        not flags
        and abs(protein_delta) <= IDEAL_PROTEIN_TOLERANCE
        and abs(fat_delta) <= IDEAL_FAT_TOLERANCE
    ):
        return MacroVerdict(status="ideal", text="ideal")
    if flags:
        return MacroVerdict(
            status="warning",
            text=" / ".join(flag.value for flag in flags),
            flags=flags,
        )
    return None


def macro_flags(
    protein_delta: float, fat_delta: float, carbs_delta: float
) -> tuple[MacroFlag, ...]:
    """Flag macro deltas beyond the tolerated range."""
    flags: list[MacroFlag] = []
    if protein_delta < PROTEIN_DEFICIT_LIMIT:
        flags.append(MacroFlag.PROTEIN_DEFICIT)
    if fat_delta > FAT_EXCESS_LIMIT:
        flags.append(MacroFlag.FAT_EXCESS)
    if carbs_delta > CARBS_EXCESS_LIMIT:
        flags.append(MacroFlag.CARBS_EXCESS)
    return tuple(flags)
