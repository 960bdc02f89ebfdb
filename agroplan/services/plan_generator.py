import json
import logging
import re
from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional

from langchain_core.prompts import ChatPromptTemplate
from pydantic import BaseModel, Field

from agroplan.core.config import settings
from agroplan.core.genai_client import get_chat_model
from agroplan.models.farming_plan import (
    DISABLED_STRIDE_DAYS,
    GeneratedFarmingPlan,
    GeneratedLocalizedText,
    LocalizedText,
    OneOffTask,
    PlanSource,
    RecurringTaskRule,
    TaskType,
    WateringRule,
)
from agroplan.prompts.farming_plan_system_prompt import FARMING_PLAN_SYSTEM_PROMPT
from agroplan.prompts.heuristic_phrases import (
    heuristic_notes_i18n,
    heuristic_title_i18n,
    plan_overview_i18n,
    plan_title_i18n,
)
from agroplan.services.task_expansion import resolve_schedule
from agroplan.utils.calendar import DateParseError, add_days, parse_loose_date, to_iso_day

logger = logging.getLogger(__name__)

DEFAULT_MATURITY_DAYS = 110

# Checked in order, first substring match wins.
_MATURITY_DAYS_BY_CROP = (
    (("rice", "paddy"), 120),
    (("wheat",), 120),
    (("maize", "corn"), 100),
    (("potato",), 95),
    (("tomato",), 95),
    (("onion",), 125),
    (("cotton",), 160),
    (("sugarcane",), 330),
)

MONSOON_MONTHS = range(6, 10)


class PlanGenerationError(Exception):
    """The generative service failed or returned an unusable plan."""


class PlanGenerationRequest(BaseModel):
    crop_type: str
    crop_name: str
    area_acres: float
    planting_date: date
    expected_harvest_date: Optional[date] = None
    country: str = Field(default_factory=lambda: settings.PLAN_COUNTRY)


class GeneratedPlanContent(BaseModel):
    """Plan content in the stored rule shape, whichever generator produced it."""

    plan_title: LocalizedText
    plan_overview: LocalizedText
    planting_date: str
    expected_harvest_date: str
    cleanup_date: str
    watering_rules: List[WateringRule] = Field(default_factory=list)
    recurring_tasks: List[RecurringTaskRule] = Field(default_factory=list)
    tasks: List[OneOffTask] = Field(default_factory=list)
    source: PlanSource


def sanitize_id(value: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", (value or "").strip().lower())
    return slug.strip("-")[:80]


def area_key(area_acres: float) -> str:
    rounded = round(float(area_acres) * 100) / 100
    text = f"{rounded:.2f}".rstrip("0").rstrip(".")
    return sanitize_id(text.replace(".", "p"))


def build_plan_id(crop: str, planting_date: date, area_acres: float) -> str:
    """Same crop, planting day and area always map to the same plan id."""
    return f"{sanitize_id(crop)}-{to_iso_day(planting_date)}-a{area_key(area_acres)}"


def infer_maturity_days(crop: str) -> int:
    key = (crop or "").strip().lower()
    for names, days in _MATURITY_DAYS_BY_CROP:
        if any(name in key for name in names):
            return days
    return DEFAULT_MATURITY_DAYS


def _task_type(value: Optional[str]) -> TaskType:
    try:
        return TaskType((value or "").strip().lower())
    except ValueError:
        return TaskType.GENERAL


def _localized(text: Optional[GeneratedLocalizedText]) -> Optional[LocalizedText]:
    if text is None:
        return None
    localized = LocalizedText(**text.model_dump())
    return localized if localized.is_usable() else None


def _neutral(text: Optional[GeneratedLocalizedText]) -> str:
    return ((text.en if text else "") or "").strip()


class PlanGenerator(ABC):
    source: PlanSource

    @abstractmethod
    async def generate(self, request: PlanGenerationRequest) -> GeneratedPlanContent:
        ...


class _HeuristicPlanBuilder:
    def __init__(self, planting: date) -> None:
        self.planting = planting
        self.watering_rules: List[WateringRule] = []
        self.recurring_tasks: List[RecurringTaskRule] = []
        self.tasks: dict[str, OneOffTask] = {}

    def water(self, start_day: int, end_day: int, every_days: int, notes: str) -> None:
        self.watering_rules.append(
            WateringRule(
                start_day=start_day,
                end_day=end_day,
                every_days=every_days,
                notes=notes,
                notes_i18n=heuristic_notes_i18n(notes),
            )
        )

    def recurring(
        self, task_type: TaskType, title: str, start_day: int, end_day: int, every_days: int, notes: str
    ) -> None:
        time_of_day, time_hhmm = resolve_schedule(task_type, None, None)
        self.recurring_tasks.append(
            RecurringTaskRule(
                id=f"{sanitize_id(task_type.value)}-{sanitize_id(title)}",
                type=task_type,
                title=title,
                title_i18n=heuristic_title_i18n(title),
                start_day=start_day,
                end_day=end_day,
                every_days=every_days,
                time_of_day=time_of_day,
                time_hhmm=time_hhmm,
                notes=notes,
                notes_i18n=heuristic_notes_i18n(notes),
            )
        )

    def task(self, task_type: TaskType, title: str, day_offset: int, notes: str) -> None:
        due = to_iso_day(add_days(self.planting, day_offset))
        time_of_day, time_hhmm = resolve_schedule(task_type, None, None)
        task_id = f"{sanitize_id(task_type.value)}-{sanitize_id(title)}-{due}"
        self.tasks[task_id] = OneOffTask(
            id=task_id,
            type=task_type,
            title=title,
            title_i18n=heuristic_title_i18n(title),
            due_date=due,
            time_of_day=time_of_day,
            time_hhmm=time_hhmm,
            notes=notes,
            notes_i18n=heuristic_notes_i18n(notes),
        )


def build_heuristic_plan(
    crop_type: str,
    crop_name: str,
    area_acres: float,
    planting_date: date,
    expected_harvest_date: Optional[date] = None,
) -> GeneratedPlanContent:
    """
    Offline schedule keyed on crop family: rice/paddy, wheat, or a generic
    vegetable schedule. Every phrase comes from the canned phrase tables so
    the plan reads in all supported languages.
    """
    crop = (crop_name or crop_type).strip()
    if expected_harvest_date is not None:
        maturity_days = max(1, (expected_harvest_date - planting_date).days)
    else:
        maturity_days = infer_maturity_days(crop)
    harvest = add_days(planting_date, maturity_days)
    monsoon = planting_date.month in MONSOON_MONTHS
    crop_key = crop.lower()

    plan = _HeuristicPlanBuilder(planting_date)

    plan.recurring(
        TaskType.FIELD,
        "Field scouting (pests, disease, weeds, moisture)",
        7,
        maturity_days,
        7,
        "Walk the plot early morning; check undersides of leaves, new growth, and waterlogging. "
        "Act only if thresholds are met.",
    )
    if monsoon:
        plan.recurring(
            TaskType.FIELD,
            "Check drainage & remove standing water (monsoon)",
            0,
            maturity_days,
            5,
            "Prevent root rot and nutrient loss; keep bunds/field channels clear.",
        )

    if "rice" in crop_key or "paddy" in crop_key:
        plan.water(
            0, 30, 1,
            "Maintain shallow water layer (2–3 cm) after establishment; "
            "skip if continuous rainfall and waterlogging risk.",
        )
        plan.water(
            31, max(31, maturity_days - 15), 2,
            "Irrigate to keep soil moist; avoid long dry gaps during tillering and panicle initiation.",
        )
        plan.water(
            max(0, maturity_days - 14), maturity_days, DISABLED_STRIDE_DAYS,
            "Stop irrigation ~10–14 days before harvest to improve grain maturity and ease harvesting.",
        )
        plan.task(
            TaskType.FERTILIZER,
            "Basal fertilization (FYM/compost + recommended NPK) and zinc if needed",
            0,
            "Apply well-decomposed FYM/compost. Use soil-test based NPK; "
            "consider zinc sulfate in zinc-deficient areas.",
        )
        plan.task(
            TaskType.FERTILIZER,
            "Top dress nitrogen (tillering stage)",
            25,
            "Split N improves uptake; apply just before irrigation or rainfall.",
        )
        plan.task(
            TaskType.FERTILIZER,
            "Top dress nitrogen/potash (panicle initiation)",
            55,
            "Critical for grain formation; avoid over-N in cloudy/humid conditions.",
        )
        plan.task(
            TaskType.PEST,
            "Install pheromone/light traps (stem borer/leaf folder monitoring)",
            10,
            "Use traps for monitoring; spray only if infestation crosses thresholds.",
        )
    elif "wheat" in crop_key:
        # Wheat irrigation follows growth milestones, not a fixed stride.
        plan.task(
            TaskType.WATERING,
            "Irrigation #1 (Crown Root Initiation - CRI)",
            21,
            "Most critical irrigation for wheat. If rainfall occurred recently and soil is moist, "
            "adjust accordingly.",
        )
        plan.task(
            TaskType.WATERING,
            "Irrigation #2 (Tillering)",
            40,
            "Avoid water stress; do not over-irrigate in cold foggy spells.",
        )
        plan.task(
            TaskType.WATERING,
            "Irrigation #3 (Jointing/Booting)",
            60,
            "Supports spike development; ensure good drainage after irrigation.",
        )
        plan.task(
            TaskType.WATERING,
            "Irrigation #4 (Heading/Flowering)",
            80,
            "Avoid stress; irrigate in morning hours when possible.",
        )
        plan.task(
            TaskType.WATERING,
            "Irrigation #5 (Milking/Dough stage)",
            95,
            "Last critical irrigation; stop irrigation 10–12 days before harvest.",
        )
        plan.task(
            TaskType.FERTILIZER,
            "Basal dose (FYM/compost + recommended NPK)",
            0,
            "Use soil-test based recommendations; place fertilizer below seed zone where applicable.",
        )
        plan.task(
            TaskType.FERTILIZER,
            "Top dress nitrogen (after first irrigation / CRI)",
            22,
            "Split N reduces lodging risk and improves grain filling.",
        )
        plan.task(
            TaskType.DISEASE,
            "Rust/leaf blight monitoring and preventive spray decision",
            55,
            "In humid/foggy weather, rust risk rises. Use resistant varieties and spray only if "
            "symptoms appear.",
        )
    else:
        plan.water(
            0, 14, 1,
            "Keep soil consistently moist for establishment; avoid waterlogging. Mulch helps in hot weather.",
        )
        plan.water(
            15, max(15, maturity_days - 10), 2,
            "Irrigate during dry spells; skip after good rainfall. Ensure drainage to prevent fungal diseases."
            if monsoon
            else "Irrigate every 2 days (adjust for soil type); avoid wetting foliage late evening.",
        )
        plan.water(
            max(0, maturity_days - 9), maturity_days, 3,
            "Reduce irrigation close to harvest to improve quality and reduce post-harvest rot.",
        )
        plan.task(
            TaskType.FERTILIZER,
            "Basal nutrition (FYM/compost + recommended NPK)",
            0,
            "Incorporate compost and basal P & K. Use soil test when available. "
            "Apply biofertilizers if using organic methods.",
        )
        plan.task(
            TaskType.FERTILIZER,
            "Top dressing (nitrogen) + micronutrient check",
            25,
            "Split nitrogen improves uptake. If leaf yellowing/poor growth, consider micronutrients "
            "(Zn/B) as per symptoms.",
        )
        plan.task(
            TaskType.PEST,
            "Install sticky/pheromone traps (monitoring)",
            10,
            "Use traps for monitoring; keep field clean to reduce pest carryover.",
        )
        plan.task(
            TaskType.DISEASE,
            "Preventive fungal risk check (humidity/leaf wetness)",
            20,
            "Avoid overhead irrigation at night; ensure airflow. Use recommended protectant fungicide "
            "only if risk is high.",
        )

    plan.task(
        TaskType.HARVEST,
        "Harvest window starts (plan labor, bags, storage, drying)",
        maturity_days,
        "Harvest at physiological maturity; avoid harvesting immediately after rain. "
        "Dry/grade produce for better price.",
    )

    planting_iso = to_iso_day(planting_date)
    harvest_iso = to_iso_day(harvest)
    return GeneratedPlanContent(
        plan_title=plan_title_i18n(crop),
        plan_overview=plan_overview_i18n(crop, planting_iso, harvest_iso),
        planting_date=planting_iso,
        expected_harvest_date=harvest_iso,
        cleanup_date=to_iso_day(add_days(harvest, 1)),
        watering_rules=plan.watering_rules,
        recurring_tasks=plan.recurring_tasks,
        tasks=sorted(plan.tasks.values(), key=lambda task: task.due_date),
        source=PlanSource.HEURISTIC,
    )


class HeuristicPlanGenerator(PlanGenerator):
    source = PlanSource.HEURISTIC

    async def generate(self, request: PlanGenerationRequest) -> GeneratedPlanContent:
        return build_heuristic_plan(
            crop_type=request.crop_type,
            crop_name=request.crop_name,
            area_acres=request.area_acres,
            planting_date=request.planting_date,
            expected_harvest_date=request.expected_harvest_date,
        )


def normalize_generated_plan(
    generated: GeneratedFarmingPlan,
    request: PlanGenerationRequest,
) -> GeneratedPlanContent:
    """Map the model's structured output onto stored rules and enforce date sanity."""
    title = _localized(generated.title)
    overview = _localized(generated.overview)
    if title is None or overview is None:
        raise PlanGenerationError("Generated plan is missing a title or overview")

    planting = request.planting_date
    try:
        harvest = parse_loose_date(generated.expected_harvest_date)
    except DateParseError:
        harvest = request.expected_harvest_date or add_days(
            planting, infer_maturity_days(request.crop_name or request.crop_type)
        )
    if harvest <= planting:
        harvest = add_days(planting, 1)

    watering_rules = []
    for rule in generated.watering_rules:
        start_day = max(0, rule.start_day)
        watering_rules.append(
            WateringRule(
                start_day=start_day,
                end_day=max(start_day, rule.end_day),
                every_days=max(1, rule.every_days),
                time_of_day=rule.time_of_day,
                time_hhmm=rule.time_hhmm,
                title=_neutral(rule.title) or None,
                title_i18n=_localized(rule.title),
                notes=_neutral(rule.notes) or None,
                notes_i18n=_localized(rule.notes),
            )
        )

    recurring_tasks = []
    for idx, rule in enumerate(generated.recurring_tasks):
        task_type = _task_type(rule.type)
        title_en = _neutral(rule.title)
        time_of_day, time_hhmm = resolve_schedule(task_type, rule.time_of_day, rule.time_hhmm)
        start_day = max(0, rule.start_day)
        recurring_tasks.append(
            RecurringTaskRule(
                id=f"{sanitize_id(task_type.value)}-{sanitize_id(title_en or f'task-{idx}')}",
                type=task_type,
                title=title_en or "Task",
                title_i18n=_localized(rule.title),
                start_day=start_day,
                end_day=max(start_day, rule.end_day),
                every_days=rule.every_days if rule.every_days > 0 else 7,
                time_of_day=time_of_day,
                time_hhmm=time_hhmm,
                notes=_neutral(rule.notes) or None,
                notes_i18n=_localized(rule.notes),
            )
        )

    tasks = []
    for idx, task in enumerate(generated.one_off_tasks):
        try:
            due = to_iso_day(parse_loose_date(task.due_date))
        except DateParseError:
            logger.warning("Dropping generated task with invalid due date %r", task.due_date)
            continue
        task_type = _task_type(task.type)
        title_en = _neutral(task.title)
        time_of_day, time_hhmm = resolve_schedule(task_type, task.time_of_day, task.time_hhmm)
        tasks.append(
            OneOffTask(
                id=f"{sanitize_id(task_type.value)}-{sanitize_id(title_en or f'task-{idx}')}-{due}",
                type=task_type,
                title=title_en or "Task",
                title_i18n=_localized(task.title),
                due_date=due,
                time_of_day=time_of_day,
                time_hhmm=time_hhmm,
                notes=_neutral(task.notes) or None,
                notes_i18n=_localized(task.notes),
            )
        )

    return GeneratedPlanContent(
        plan_title=title,
        plan_overview=overview,
        planting_date=to_iso_day(planting),
        expected_harvest_date=to_iso_day(harvest),
        cleanup_date=to_iso_day(add_days(harvest, 1)),
        watering_rules=watering_rules,
        recurring_tasks=recurring_tasks,
        tasks=tasks,
        source=PlanSource.GEMINI,
    )


class GeminiPlanGenerator(PlanGenerator):
    """Asks Gemini for a structured, trilingual schedule."""

    source = PlanSource.GEMINI

    def __init__(self, model: Optional[str] = None, chain=None) -> None:
        self.model = model or settings.PLAN_GENERATION_MODEL
        self._chain = chain

    def _build_chain(self):
        prompt = ChatPromptTemplate.from_messages(
            [("system", "{system_prompt}"), ("human", "{input_json}")]
        )
        model = get_chat_model(model=self.model, temperature=0.2)
        return prompt | model.with_structured_output(GeneratedFarmingPlan, method="json_schema")

    async def generate(self, request: PlanGenerationRequest) -> GeneratedPlanContent:
        if self._chain is None:
            self._chain = self._build_chain()
        input_data = {
            "country": request.country,
            "crop_type": request.crop_type,
            "crop_name": request.crop_name,
            "area_acres": request.area_acres,
            "planting_date": to_iso_day(request.planting_date),
            "expected_harvest_date": (
                f"{to_iso_day(request.expected_harvest_date)} (user-provided; validate and correct if unrealistic)"
                if request.expected_harvest_date
                else "not provided; estimate"
            ),
        }
        try:
            generated = await self._chain.ainvoke(
                {
                    "system_prompt": FARMING_PLAN_SYSTEM_PROMPT,
                    "input_json": json.dumps(input_data),
                }
            )
        except Exception as exc:
            raise PlanGenerationError(f"Farming plan generation failed: {exc}") from exc

        if generated is None:
            raise PlanGenerationError("Farming plan generation returned an empty response")
        if isinstance(generated, dict):
            try:
                generated = GeneratedFarmingPlan.model_validate(generated)
            except ValueError as exc:
                raise PlanGenerationError("Farming plan generation returned an invalid schedule") from exc
        return normalize_generated_plan(generated, request)
