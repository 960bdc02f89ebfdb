"""
Rule expansion engine.

Turns a plan's watering rules, recurring task rules and one-off tasks into
dated task instances for a window. Pure and synchronous: identical plan,
window and language always give the identical list.
"""
import logging
import re
from datetime import date
from typing import Iterable, Iterator, List, Optional, Union

from agroplan.models.farming_plan import (
    DISABLED_STRIDE_DAYS,
    FarmingPlan,
    TaskInstance,
    TaskType,
    TimeOfDay,
)
from agroplan.prompts.heuristic_phrases import NOTES_PHRASES, TITLE_PHRASES
from agroplan.services.localization import (
    normalize_language,
    resolve,
    resolve_with_heuristic_fallback,
)
from agroplan.utils.calendar import (
    DateParseError,
    add_days,
    clamp_iso_day,
    parse_loose_date,
    to_iso_day,
    today as current_day,
)

logger = logging.getLogger(__name__)

DEFAULT_WATERING_TITLE = "Water/irrigate (as per stage)"

_TIME_OF_DAY_BY_TYPE = {
    TaskType.WATERING: TimeOfDay.MORNING,
    TaskType.FERTILIZER: TimeOfDay.MORNING,
    TaskType.PEST: TimeOfDay.EVENING,
    TaskType.DISEASE: TimeOfDay.MORNING,
    TaskType.FIELD: TimeOfDay.AFTERNOON,
    TaskType.HARVEST: TimeOfDay.MORNING,
    TaskType.GENERAL: TimeOfDay.AFTERNOON,
}

_CLOCK_TIME_BY_TIME_OF_DAY = {
    TimeOfDay.MORNING: "07:00",
    TimeOfDay.AFTERNOON: "13:00",
    TimeOfDay.EVENING: "18:00",
    TimeOfDay.NIGHT: "20:30",
}

_MM_PATTERN = re.compile(r"(\d+(?:\.\d+)?)(?:\s*-\s*(\d+(?:\.\d+)?))?\s*mm\b")
_LITRE_PATTERN = re.compile(
    r"(\d+(?:\.\d+)?)(?:\s*-\s*(\d+(?:\.\d+)?))?\s*(?:l|litre|liter|liters|litres)\b"
)


def infer_time_of_day(task_type: TaskType) -> TimeOfDay:
    return _TIME_OF_DAY_BY_TYPE.get(task_type, TimeOfDay.AFTERNOON)


def default_time_hhmm(time_of_day: TimeOfDay) -> str:
    return _CLOCK_TIME_BY_TIME_OF_DAY.get(time_of_day, "13:00")


def resolve_schedule(
    task_type: TaskType,
    time_of_day: Optional[TimeOfDay],
    time_hhmm: Optional[str],
) -> tuple[TimeOfDay, str]:
    """Fill a missing time of day from the task type and a missing clock time from the time of day."""
    resolved_time_of_day = time_of_day or infer_time_of_day(task_type)
    return resolved_time_of_day, time_hhmm or default_time_hhmm(resolved_time_of_day)


def extract_water_amount_hint(notes: Optional[str]) -> Optional[str]:
    """Pull an irrigation amount such as '15-20 mm' or '5 L' out of free-form notes."""
    text = (notes or "").lower()
    if not text:
        return None

    match = _MM_PATTERN.search(text)
    if match:
        low, high = match.group(1), match.group(2)
        return f"{low}-{high} mm" if high else f"{low} mm"

    match = _LITRE_PATTERN.search(text)
    if match:
        low, high = match.group(1), match.group(2)
        return f"{low}-{high} L" if high else f"{low} L"

    return None


def iter_occurrences(
    planting: date,
    start_day: int,
    end_day: int,
    every_days: int,
    window_start: date,
    window_end: date,
) -> Iterator[date]:
    """
    Yield rule occurrences inside [window_start, window_end].

    The cursor jumps straight to the first stride-aligned occurrence on or
    after window_start instead of walking the sequence from start_day.
    """
    if every_days >= DISABLED_STRIDE_DAYS or every_days < 1:
        return
    first = add_days(planting, start_day)
    last = add_days(planting, end_day)
    stop = min(last, window_end)

    cursor = first
    if cursor < window_start:
        gap = (window_start - cursor).days
        strides = -(-gap // every_days)
        cursor = add_days(cursor, strides * every_days)

    while cursor <= stop:
        yield cursor
        cursor = add_days(cursor, every_days)


def _sort_key(instance: TaskInstance) -> tuple:
    return (instance.due_date, instance.title)


def dedupe_task_instances(instances: Iterable[TaskInstance]) -> List[TaskInstance]:
    unique: dict[tuple, TaskInstance] = {}
    for instance in instances:
        unique[instance.dedup_key()] = instance
    return list(unique.values())


def expand(
    plan: FarmingPlan,
    window_start: Union[str, date],
    window_end: Union[str, date],
    language: Optional[str] = None,
) -> List[TaskInstance]:
    """Task instances of `plan` due within the window, deduplicated and sorted by (due_date, title)."""
    lang = normalize_language(language)
    start_iso = to_iso_day(window_start) if isinstance(window_start, date) else window_start
    end_iso = to_iso_day(window_end) if isinstance(window_end, date) else window_end
    if start_iso > end_iso:
        return []

    try:
        planting = parse_loose_date(plan.planting_date)
    except DateParseError:
        logger.warning(
            "Skipping plan %s: stored planting date %r is not a valid day",
            plan.id,
            plan.planting_date,
        )
        return []

    plan_start_iso = to_iso_day(planting)
    plan_end_iso = plan.expected_harvest_date
    if end_iso < plan_start_iso or start_iso > plan_end_iso:
        return []
    safe_start_iso = clamp_iso_day(start_iso, plan_start_iso, plan_end_iso)
    safe_end_iso = clamp_iso_day(end_iso, plan_start_iso, plan_end_iso)
    if safe_end_iso < safe_start_iso:
        return []
    try:
        safe_start = parse_loose_date(safe_start_iso)
        safe_end = parse_loose_date(safe_end_iso)
    except DateParseError:
        logger.warning(
            "Skipping plan %s: window %s..%s could not be parsed",
            plan.id,
            safe_start_iso,
            safe_end_iso,
        )
        return []

    plan_title = resolve(plan.plan_title, lang) or plan.crop_name

    def instance(task_type, title, title_i18n, notes, notes_i18n, due_iso, time_of_day, time_hhmm):
        resolved_time_of_day, resolved_hhmm = resolve_schedule(task_type, time_of_day, time_hhmm)
        return TaskInstance(
            plan_id=plan.id,
            crop_name=plan.crop_name,
            plan_title=plan_title,
            plan_expected_harvest_date=plan.expected_harvest_date,
            type=task_type,
            title=resolve_with_heuristic_fallback(title_i18n, title, lang, TITLE_PHRASES),
            due_date=due_iso,
            time_of_day=resolved_time_of_day,
            time_hhmm=resolved_hhmm,
            notes=resolve_with_heuristic_fallback(notes_i18n, notes, lang, NOTES_PHRASES),
        )

    results: List[TaskInstance] = []

    for task in plan.tasks:
        if safe_start_iso <= task.due_date <= safe_end_iso:
            results.append(
                instance(
                    task.type, task.title, task.title_i18n, task.notes, task.notes_i18n,
                    task.due_date, task.time_of_day, task.time_hhmm,
                )
            )

    for rule in plan.recurring_tasks:
        for due in iter_occurrences(
            planting, rule.start_day, rule.end_day, rule.every_days, safe_start, safe_end
        ):
            results.append(
                instance(
                    rule.type, rule.title, rule.title_i18n, rule.notes, rule.notes_i18n,
                    to_iso_day(due), rule.time_of_day, rule.time_hhmm,
                )
            )

    for rule in plan.watering_rules:
        for due in iter_occurrences(
            planting, rule.start_day, rule.end_day, rule.every_days, safe_start, safe_end
        ):
            results.append(
                instance(
                    TaskType.WATERING, rule.title or DEFAULT_WATERING_TITLE, rule.title_i18n,
                    rule.notes, rule.notes_i18n, to_iso_day(due), rule.time_of_day, rule.time_hhmm,
                )
            )

    unique = dedupe_task_instances(results)
    unique.sort(key=_sort_key)
    return unique


def expand_upcoming(
    plan: FarmingPlan,
    window_days: int,
    language: Optional[str] = None,
    today: Optional[date] = None,
) -> List[TaskInstance]:
    """Tasks from today through today + window_days."""
    start = today or current_day()
    return expand(plan, start, add_days(start, max(0, window_days)), language)


def merge_task_instances(instances: Iterable[TaskInstance]) -> List[TaskInstance]:
    """Deduplicate instances gathered from several plans and order them for a combined agenda."""
    unique = dedupe_task_instances(instances)
    unique.sort(
        key=lambda item: (
            item.due_date,
            item.plan_expected_harvest_date or "",
            item.plan_title or item.crop_name,
            item.title,
        )
    )
    return unique
