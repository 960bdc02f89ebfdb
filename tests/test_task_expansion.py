from datetime import date

from agroplan.models.farming_plan import (
    LocalizedText,
    OneOffTask,
    RecurringTaskRule,
    TaskType,
    TimeOfDay,
    WateringRule,
)
from agroplan.prompts.heuristic_phrases import TITLE_PHRASES
from agroplan.services.task_expansion import (
    DEFAULT_WATERING_TITLE,
    expand,
    expand_upcoming,
    extract_water_amount_hint,
    iter_occurrences,
    merge_task_instances,
)


def _watering(start_day, end_day, every_days, **extra):
    return WateringRule(start_day=start_day, end_day=end_day, every_days=every_days, **extra)


def test_cursor_aligns_to_stride_inside_window(make_plan):
    plan = make_plan(watering_rules=[_watering(0, 30, 3)])
    tasks = expand(plan, "2024-01-10", "2024-01-16")
    assert [task.due_date for task in tasks] == ["2024-01-10", "2024-01-13", "2024-01-16"]


def test_first_occurrence_after_window_yields_nothing(make_plan):
    plan = make_plan(watering_rules=[_watering(20, 40, 1)])
    assert expand(plan, "2024-01-01", "2024-01-10") == []


def test_disabled_stride_never_fires(make_plan):
    plan = make_plan(watering_rules=[_watering(0, 60, 9999)])
    assert expand(plan, "2024-01-01", "2024-03-01") == []
    assert list(iter_occurrences(date(2024, 1, 1), 0, 60, 10000, date(2024, 1, 1), date(2024, 3, 1))) == []


def test_rule_end_day_is_inclusive():
    days = list(iter_occurrences(date(2024, 1, 1), 0, 4, 2, date(2024, 1, 1), date(2024, 2, 1)))
    assert days == [date(2024, 1, 1), date(2024, 1, 3), date(2024, 1, 5)]


def test_window_is_clipped_to_plan_span(make_plan):
    plan = make_plan(
        watering_rules=[_watering(0, 200, 1)],
        expected_harvest_date="2024-01-05",
        cleanup_date="2024-01-06",
    )
    tasks = expand(plan, "2023-12-25", "2024-01-31")
    assert [task.due_date for task in tasks] == [
        "2024-01-01",
        "2024-01-02",
        "2024-01-03",
        "2024-01-04",
        "2024-01-05",
    ]


def test_window_outside_plan_span_is_empty(make_plan):
    plan = make_plan(watering_rules=[_watering(0, 200, 1)])
    assert expand(plan, "2023-12-01", "2023-12-31") == []
    assert expand(plan, "2024-05-01", "2024-05-31") == []


def test_inverted_window_is_empty(make_plan):
    plan = make_plan(watering_rules=[_watering(0, 30, 1)])
    assert expand(plan, "2024-01-10", "2024-01-05") == []


def test_expansion_is_deterministic_and_sorted(make_plan):
    plan = make_plan(
        watering_rules=[_watering(0, 30, 2)],
        recurring_tasks=[
            RecurringTaskRule(
                id="field-scout", type=TaskType.FIELD, title="Scout", start_day=0, end_day=30, every_days=3
            )
        ],
        tasks=[OneOffTask(id="fert", type=TaskType.FERTILIZER, title="Apply urea", due_date="2024-01-07")],
    )
    first = expand(plan, "2024-01-01", "2024-01-20", "hi")
    second = expand(plan, "2024-01-01", "2024-01-20", "hi")
    assert first == second
    keys = [(task.due_date, task.title) for task in first]
    assert keys == sorted(keys)
    assert all("2024-01-01" <= task.due_date <= "2024-01-20" for task in first)


def test_duplicate_occurrences_collapse(make_plan):
    rule = RecurringTaskRule(id="weed", title="Weeding", start_day=0, end_day=10, every_days=1)
    plan = make_plan(
        recurring_tasks=[rule, rule.model_copy(update={"id": "weed-2", "notes": "second copy"})],
        tasks=[OneOffTask(id="weed-once", title="Weeding", due_date="2024-01-03")],
    )
    tasks = expand(plan, "2024-01-01", "2024-01-05")
    assert len(tasks) == 5
    assert len({task.dedup_key() for task in tasks}) == 5
    # Later writers win on the same key.
    assert tasks[2].notes == "second copy"


def test_schedule_defaults_fill_missing_times(make_plan):
    plan = make_plan(
        watering_rules=[_watering(0, 0, 1)],
        tasks=[OneOffTask(id="p", type=TaskType.PEST, title="Trap check", due_date="2024-01-01")],
    )
    by_title = {task.title: task for task in expand(plan, "2024-01-01", "2024-01-01")}
    assert by_title[DEFAULT_WATERING_TITLE].time_of_day == TimeOfDay.MORNING
    assert by_title[DEFAULT_WATERING_TITLE].time_hhmm == "07:00"
    assert by_title["Trap check"].time_of_day == TimeOfDay.EVENING
    assert by_title["Trap check"].time_hhmm == "18:00"


def test_titles_localize_from_stored_text_and_phrase_table(make_plan):
    plan = make_plan(
        plan_title=LocalizedText(en="Tomato plan", bn="টমেটো পরিকল্পনা"),
        watering_rules=[_watering(0, 0, 1)],
        tasks=[
            OneOffTask(id="a", title="Custom chore", due_date="2024-01-01"),
            OneOffTask(
                id="b",
                title="Stake plants",
                title_i18n=LocalizedText(en="Stake plants", bn="গাছে খুঁটি দিন"),
                due_date="2024-01-01",
            ),
        ],
    )
    titles = {task.title for task in expand(plan, "2024-01-01", "2024-01-01", "bn")}
    assert titles == {TITLE_PHRASES[DEFAULT_WATERING_TITLE].bn, "Custom chore", "গাছে খুঁটি দিন"}
    assert expand(plan, "2024-01-01", "2024-01-01", "bn")[0].plan_title == "টমেটো পরিকল্পনা"


def test_corrupt_planting_date_yields_nothing(make_plan):
    plan = make_plan(planting_date="not-a-date", watering_rules=[_watering(0, 30, 1)])
    assert expand(plan, "2024-01-01", "2024-01-31") == []


def test_expand_upcoming_covers_today_through_window(make_plan):
    plan = make_plan(watering_rules=[_watering(0, 90, 1)])
    tasks = expand_upcoming(plan, 3, today=date(2024, 1, 10))
    assert [task.due_date for task in tasks] == ["2024-01-10", "2024-01-11", "2024-01-12", "2024-01-13"]


def test_merge_orders_by_date_then_harvest(make_plan):
    early = make_plan(id="early", expected_harvest_date="2024-02-01", watering_rules=[_watering(0, 30, 1)])
    late = make_plan(id="late", expected_harvest_date="2024-03-01", watering_rules=[_watering(0, 30, 1)])
    merged = merge_task_instances(
        expand(late, "2024-01-01", "2024-01-02") + expand(early, "2024-01-01", "2024-01-02")
    )
    assert [(task.due_date, task.plan_id) for task in merged] == [
        ("2024-01-01", "early"),
        ("2024-01-01", "late"),
        ("2024-01-02", "early"),
        ("2024-01-02", "late"),
    ]


def test_water_amount_hint():
    assert extract_water_amount_hint("Apply 10-15 mm of water") == "10-15 mm"
    assert extract_water_amount_hint("About 25mm per irrigation") == "25 mm"
    assert extract_water_amount_hint("Give 2 litres per plant") == "2 L"
    assert extract_water_amount_hint("Keep soil moist") is None
    assert extract_water_amount_hint(None) is None
