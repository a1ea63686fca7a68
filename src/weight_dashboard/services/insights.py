"""Daily review text and data-completeness warnings."""

from collections.abc import Sequence
from datetime import date, timedelta

from weight_dashboard.domain.daily_log import DailyLogEntry
from weight_dashboard.domain.meals import MacroTotals, MealsByDate
from weight_dashboard.domain.metrics import (
    DataWarning,
    Insight,
    InsightBundle,
    InsightStatus,
    InsightSummary,
    MacroFlag,
    SummaryKind,
    WarningKind,
)
from weight_dashboard.domain.profile import DashboardSettings, Goals
from weight_dashboard.services.meals import pfc_ratio, sum_macros
from weight_dashboard.services.metrics import (
    DEFAULT_TARGET_STEPS,
    WEEK,
    macro_flags,
)
from weight_dashboard.services.normalize import (
    format_fixed,
    is_positive,
    round_half_up,
)

CALORIE_EXCESS_KCAL = 200
CALORIE_SHORTFALL_KCAL = -200
STEPS_NEAR_GOAL_PERCENT = 70
PFC_GOOD_PROTEIN_DELTA = -10
PFC_GOOD_FAT_DELTA = 10
WEIGHT_STABLE_KG = 0.3
WEIGHT_RISING_KG = 0.5
WAIST_STABLE_CM = 0.5
COMPLETENESS_DAYS = 3

_SUMMARY_TEXT = {
    SummaryKind.CELEBRATORY: "Great day yesterday! Keep it going today.",
    SummaryKind.MIXED: "Keep the good habits and work on the improvements.",
    SummaryKind.NEEDS_IMPROVEMENT: "Use yesterday's lessons today.",
    SummaryKind.NO_DATA: "Enter data to see insights.",
}


def select_insight_logs(
    entries: Sequence[DailyLogEntry], today: date
) -> tuple[DailyLogEntry | None, DailyLogEntry | None]:
    """Return ``(reference_log, today_log)`` for the daily review.

    The reference is yesterday's entry, else the newest entry that is not
    today's, else the newest entry.
    """
    newest_first = sorted(entries, key=lambda entry: entry.date, reverse=True)
    today_key = today.isoformat()
    yesterday_key = (today - timedelta(days=1)).isoformat()

    today_log = next((e for e in newest_first if e.date == today_key), None)
    reference = next((e for e in newest_first if e.date == yesterday_key), None)
    if reference is None:
        reference = next((e for e in newest_first if e.date != today_key), None)
    if reference is None and newest_first:
        reference = newest_first[0]
    return reference, today_log


def build_daily_insight(
    entries: Sequence[DailyLogEntry],
    meals_by_date: MealsByDate,
    settings: DashboardSettings,
    today: date,
) -> InsightBundle | None:
    """Pick the reference day, join its meals and produce the review."""
    reference, today_log = select_insight_logs(entries, today)
    if reference is None:
        return None
    reference_macros = None
    if reference.date in meals_by_date:
        totals = sum_macros(meals_by_date[reference.date])
        if totals.has_macros:
            reference_macros = totals
    return daily_insight(
        reference, today_log, entries, settings.goals, settings, reference_macros
    )


def daily_insight(  # noqa: PLR0913
    reference_log: DailyLogEntry,
    today_log: DailyLogEntry | None,
    all_entries: Sequence[DailyLogEntry],
    goals: Goals,
    settings: DashboardSettings,
    reference_macros: MacroTotals | None,
) -> InsightBundle:
    """Review the reference day's intake and activity plus today's body data."""
    improvements: list[str] = []
    positives: list[str] = []
    newest_first = sorted(all_entries, key=lambda entry: entry.date, reverse=True)

    calories = _calorie_insight(reference_log, goals, improvements, positives)
    steps = _steps_insight(reference_log, settings, improvements, positives)
    pfc = (
        _pfc_insight(reference_macros, goals, improvements, positives)
        if reference_macros is not None
        else None
    )
    weight = _weight_insight(
        reference_log, today_log, newest_first, improvements, positives
    )
    waist = _waist_insight(today_log, newest_first, positives)

    return InsightBundle(
        reference_date=reference_log.date,
        summary=_summary(improvements, positives),
        calories=calories,
        steps=steps,
        pfc=pfc,
        weight=weight,
        waist=waist,
        improvements=improvements,
        positives=positives,
    )


def _calorie_insight(
    log: DailyLogEntry,
    goals: Goals,
    improvements: list[str],
    positives: list[str],
) -> Insight | None:
    if not is_positive(log.calories_intake):
        return None
    intake = log.calories_intake
    diff = intake - goals.calories
    shown = f"{_number(intake)} kcal"
    if diff > CALORIE_EXCESS_KCAL:
        improvements.append(
            "Bring today's intake back toward the goal (cut snacks and fat)"
        )
        return Insight(InsightStatus.NEGATIVE, f"{shown} (goal +{_number(diff)} kcal)")
    if diff > 0:
        return Insight(InsightStatus.WARNING, f"{shown} (goal +{_number(diff)} kcal)")
    if diff >= CALORIE_SHORTFALL_KCAL:
        positives.append("Calorie intake was well managed yesterday")
        return Insight(InsightStatus.POSITIVE, f"{shown} (on target)")
    improvements.append("Intake ran low; eat properly today")
    return Insight(InsightStatus.WARNING, f"{shown} (goal {_number(diff)} kcal)")


def _steps_insight(
    log: DailyLogEntry,
    settings: DashboardSettings,
    improvements: list[str],
    positives: list[str],
) -> Insight | None:
    if log.steps is None:
        return None
    target = settings.target_steps or DEFAULT_TARGET_STEPS
    ratio = int(round_half_up(log.steps / target * 100))
    shown = f"{log.steps:,} steps"
    if log.steps >= target:
        positives.append("Reached the step goal yesterday")
        return Insight(InsightStatus.POSITIVE, f"{shown} (goal reached, {ratio}%)")
    if ratio >= STEPS_NEAR_GOAL_PERCENT:
        improvements.append("Walk a little more today to raise activity")
        return Insight(InsightStatus.WARNING, f"{shown} ({ratio}% of goal)")
    improvements.append("Activity was low; make a point of walking today")
    return Insight(InsightStatus.NEGATIVE, f"{shown} ({ratio}% of goal)")


def _pfc_insight(
    grams: MacroTotals,
    goals: Goals,
    improvements: list[str],
    positives: list[str],
) -> Insight:
    protein_delta = grams.protein - goals.protein
    fat_delta = grams.fat - goals.fat
    carbs_delta = grams.carbs - goals.carbs
    flags = macro_flags(protein_delta, fat_delta, carbs_delta)

    ratio = pfc_ratio(grams)
    shown = f"P{ratio.protein}% F{ratio.fat}% C{ratio.carbs}%"
    if (
        not flags
        and protein_delta >= PFC_GOOD_PROTEIN_DELTA
        and fat_delta <= PFC_GOOD_FAT_DELTA
    ):
        positives.append("PFC balance was good")
        return Insight(InsightStatus.POSITIVE, f"{shown} (good)")
    if flags:
        if MacroFlag.PROTEIN_DEFICIT in flags:
            improvements.append(
                f"Add {abs(int(round_half_up(protein_delta)))} g of protein "
                "(protein shake or chicken)"
            )
        if MacroFlag.FAT_EXCESS in flags:
            improvements.append(
                f"Cut {int(round_half_up(fat_delta))} g of fat (skip fried food)"
            )
        labels = " / ".join(flag.value for flag in flags)
        return Insight(InsightStatus.WARNING, f"{shown} ({labels})")
    return Insight(InsightStatus.NEUTRAL, shown)


def _weight_insight(
    reference_log: DailyLogEntry,
    today_log: DailyLogEntry | None,
    newest_first: Sequence[DailyLogEntry],
    improvements: list[str],
    positives: list[str],
) -> Insight | None:
    weight_log = today_log or reference_log
    if not is_positive(weight_log.weight):
        return None
    label = "This morning" if today_log else "Latest"
    shown = f"{label} {_number(weight_log.weight)} kg"
    recent = [
        entry.weight
        for entry in newest_first
        if is_positive(entry.weight) and entry.date != weight_log.date
    ][:WEEK]
    if not recent:
        return Insight(InsightStatus.NEUTRAL, shown)

    diff = weight_log.weight - sum(recent) / len(recent)
    if abs(diff) < WEIGHT_STABLE_KG:
        positives.append("Weight is stable")
        return Insight(InsightStatus.POSITIVE, f"{shown} (in line with weekly average)")
    if diff > WEIGHT_RISING_KG:
        improvements.append(
            "Weight is trending up; watch today's calories and activity"
        )
        return Insight(
            InsightStatus.WARNING,
            f"{shown} (+{format_fixed(diff, 1)} kg vs weekly average)",
        )
    if diff > 0:
        return Insight(
            InsightStatus.NEUTRAL,
            f"{shown} (+{format_fixed(diff, 1)} kg vs weekly average)",
        )
    return Insight(
        InsightStatus.POSITIVE,
        f"{shown} ({format_fixed(diff, 1)} kg vs weekly average)",
    )


def _waist_insight(
    today_log: DailyLogEntry | None,
    newest_first: Sequence[DailyLogEntry],
    positives: list[str],
) -> Insight | None:
    if today_log is None or not is_positive(today_log.waist):
        return None
    shown = f"This morning {_number(today_log.waist)} cm"
    previous = next(
        (
            entry
            for entry in newest_first
            if is_positive(entry.waist) and entry.date != today_log.date
        ),
        None,
    )
    if previous is None:
        return Insight(InsightStatus.NEUTRAL, shown)

    diff = today_log.waist - previous.waist
    if abs(diff) < WAIST_STABLE_CM:
        return Insight(InsightStatus.NEUTRAL, f"{shown} (maintained)")
    if diff < 0:
        positives.append("Waist is shrinking")
        return Insight(InsightStatus.POSITIVE, f"{shown} ({format_fixed(diff, 1)} cm)")
    return Insight(InsightStatus.WARNING, f"{shown} (+{format_fixed(diff, 1)} cm)")


def _summary(improvements: list[str], positives: list[str]) -> InsightSummary:
    if positives and not improvements:
        kind = SummaryKind.CELEBRATORY
    elif positives:
        kind = SummaryKind.MIXED
    elif improvements:
        kind = SummaryKind.NEEDS_IMPROVEMENT
    else:
        kind = SummaryKind.NO_DATA
    return InsightSummary(kind=kind, text=_SUMMARY_TEXT[kind])


def check_data_completeness(
    entries: Sequence[DailyLogEntry],
    meals_by_date: MealsByDate,
    reference_date: date,
) -> list[DataWarning]:
    """Flag gaps for the reference date and the two days before it.

    The reference date only needs its morning measurements and is never
    reported as missing entirely.
    """
    by_date = {entry.date: entry for entry in entries}
    warnings: list[DataWarning] = []
    for offset in range(COMPLETENESS_DAYS):
        day = (reference_date - timedelta(days=offset)).isoformat()
        log = by_date.get(day)
        if log is None:
            if offset > 0:
                warnings.append(
                    DataWarning(
                        date=day,
                        kind=WarningKind.NO_DATA,
                        message="No entry in the spreadsheet",
                    )
                )
            continue

        missing: list[str] = []
        if not is_positive(log.weight):
            missing.append("weight")
        if not is_positive(log.waist):
            missing.append("waist")
        if offset > 0:
            if not is_positive(log.calories_intake):
                missing.append("calories")
            if log.steps is None:
                missing.append("steps")
            if is_positive(log.calories_intake) and day not in meals_by_date:
                warnings.append(
                    DataWarning(
                        date=day,
                        kind=WarningKind.MISSING_MEALS,
                        message="Meal details are not registered",
                    )
                )
        if missing:
            warnings.append(
                DataWarning(
                    date=day,
                    kind=WarningKind.MISSING_FIELDS,
                    message=f"Missing: {', '.join(missing)}",
                    missing_fields=tuple(missing),
                )
            )
    return warnings


def _number(value: float) -> str:
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,}"
