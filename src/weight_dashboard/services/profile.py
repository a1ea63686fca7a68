"""Settings resolution, date-dependent goals and goal history."""

import dataclasses
import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum

from weight_dashboard.domain.profile import (
    DashboardSettings,
    GoalHistoryEntry,
    GoalTimelineItem,
    Plan,
)
from weight_dashboard.services.normalize import (
    normalize_date,
    normalize_int,
    normalize_number,
)

_GOALS_PREFIX = "goals."

_logger = logging.getLogger(__name__)


class FieldKind(Enum):
    NUMBER = "number"
    INT = "int"
    DATE = "date"
    TEXT = "text"


@dataclass(frozen=True)
class SettingField:
    """A setting that the settings sheet may override."""

    key: str
    kind: FieldKind

    @property
    def is_goal(self) -> bool:
        return self.key.startswith(_GOALS_PREFIX)

    @property
    def attribute(self) -> str:
        return self.key.removeprefix(_GOALS_PREFIX)


SETTING_FIELDS: dict[str, SettingField] = {
    field.key: field
    for field in (
        SettingField("target_weight", FieldKind.NUMBER),
        SettingField("target_steps", FieldKind.INT),
        SettingField("start_weight", FieldKind.NUMBER),
        SettingField("start_date", FieldKind.DATE),
        SettingField("height", FieldKind.NUMBER),
        SettingField("age", FieldKind.INT),
        SettingField("gender", FieldKind.TEXT),
        SettingField("basal_metabolism", FieldKind.NUMBER),
        SettingField("calorie_change_date", FieldKind.DATE),
        SettingField("goals.calories", FieldKind.NUMBER),
        SettingField("goals.calories_before_change_date", FieldKind.NUMBER),
        SettingField("goals.protein", FieldKind.NUMBER),
        SettingField("goals.fat", FieldKind.NUMBER),
        SettingField("goals.carbs", FieldKind.NUMBER),
        SettingField("goals.pfc_ratio", FieldKind.TEXT),
    )
}


def default_settings() -> DashboardSettings:
    """Return the built-in settings used when no settings sheet exists."""
    return DashboardSettings()


def resolve_settings(rows: Sequence[Sequence[object]]) -> DashboardSettings:
    """Resolve settings from a two-column (key, value) sheet; row 0 is a header."""
    if len(rows) < 2:  # noqa: PLR2004
        return default_settings()
    pairs = [(row[0], row[1]) for row in rows[1:] if len(row) >= 2]  # noqa: PLR2004
    return apply_overrides(default_settings(), pairs)


def settings_from_mapping(raw: Mapping[str, object]) -> DashboardSettings:
    """Resolve settings from a snapshot's ``settings`` object."""
    pairs: list[tuple[object, object]] = []
    for key, value in raw.items():
        if key == "goals" and isinstance(value, Mapping):
            pairs.extend((f"{_GOALS_PREFIX}{k}", v) for k, v in value.items())
        else:
            pairs.append((key, value))
    return apply_overrides(default_settings(), pairs)


def apply_overrides(
    base: DashboardSettings, pairs: Iterable[tuple[object, object]]
) -> DashboardSettings:
    """Apply ``(key, value)`` overrides declared in ``SETTING_FIELDS``."""
    top: dict[str, object] = {}
    goals: dict[str, object] = {}
    for raw_key, raw_value in pairs:
        key = str(raw_key).strip() if raw_key is not None else ""
        if not key or raw_value is None or raw_value == "":
            continue
        field = SETTING_FIELDS.get(key)
        if field is None:
            _logger.info("Ignoring unknown setting %r", key)
            continue
        value = _coerce(field, raw_value)
        if value is None:
            _logger.warning("Ignoring invalid value %r for setting %r", raw_value, key)
            continue
        if field.is_goal:
            goals[field.attribute] = value
        else:
            top[field.attribute] = value
    resolved_goals = dataclasses.replace(base.goals, **goals)
    return dataclasses.replace(base, goals=resolved_goals, **top)


def _coerce(field: SettingField, raw_value: object) -> object | None:
    if field.kind is FieldKind.NUMBER:
        return normalize_number(raw_value)
    if field.kind is FieldKind.INT:
        return normalize_int(raw_value)
    if field.kind is FieldKind.DATE:
        return normalize_date(raw_value)
    text = str(raw_value).strip()
    return text or None


def calorie_target_for_date(day: str, settings: DashboardSettings) -> float:
    """Return the calorie goal in effect on ``day``."""
    change_date = settings.calorie_change_date
    if change_date is not None and day < change_date:
        return settings.goals.calories_before_change_date
    return settings.goals.calories


def parse_goal_history(raw: object) -> list[GoalHistoryEntry]:
    """Parse the goal history list of a snapshot."""
    if not isinstance(raw, Sequence) or isinstance(raw, str):
        return []
    history: list[GoalHistoryEntry] = []
    for item in raw:
        if not isinstance(item, Mapping):
            continue
        day = normalize_date(item.get("date"))
        if day is None:
            continue
        history.append(
            GoalHistoryEntry(
                date=day,
                title=str(item.get("title") or ""),
                note=str(item.get("note") or ""),
                calories=normalize_number(item.get("calories")) or 0.0,
                protein=normalize_number(item.get("protein")) or 0.0,
                fat=normalize_number(item.get("fat")) or 0.0,
                carbs=normalize_number(item.get("carbs")) or 0.0,
                current=bool(item.get("current", False)),
            )
        )
    return history


def current_goal(history: Sequence[GoalHistoryEntry]) -> GoalHistoryEntry | None:
    """Return the entry flagged current, else the chronologically last one."""
    if not history:
        return None
    for entry in history:
        if entry.current:
            return entry
    return max(history, key=lambda entry: entry.date)


def goal_timeline(history: Sequence[GoalHistoryEntry]) -> list[GoalTimelineItem]:
    """Return history newest first, with deltas against the older entry."""
    ordered = sorted(history, key=lambda entry: entry.date, reverse=True)
    timeline: list[GoalTimelineItem] = []
    for index, entry in enumerate(ordered):
        previous = ordered[index + 1] if index + 1 < len(ordered) else None
        timeline.append(
            GoalTimelineItem(
                entry=entry,
                calories_delta=_delta(entry.calories, previous, "calories"),
                protein_delta=_delta(entry.protein, previous, "protein"),
                fat_delta=_delta(entry.fat, previous, "fat"),
                carbs_delta=_delta(entry.carbs, previous, "carbs"),
            )
        )
    return timeline


def _delta(
    value: float, previous: GoalHistoryEntry | None, attribute: str
) -> float | None:
    if previous is None:
        return None
    return value - getattr(previous, attribute)


def parse_plan(raw: object) -> Plan | None:
    """Parse the optional ``plan`` object of a snapshot."""
    if not isinstance(raw, Mapping):
        return None
    guidelines = raw.get("guidelines") or []
    if isinstance(guidelines, str):
        guidelines = [guidelines]
    return Plan(
        current_phase=str(raw.get("current_phase") or ""),
        target_date=normalize_date(raw.get("target_date")),
        description=str(raw.get("description") or ""),
        guidelines=tuple(str(item) for item in guidelines if item),
    )
