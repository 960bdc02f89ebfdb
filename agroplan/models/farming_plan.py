from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

DISABLED_STRIDE_DAYS = 9999


class Language(str, Enum):
    """Languages the plan copy is produced in. English is the neutral language."""

    EN = "en"
    HI = "hi"
    BN = "bn"


class TaskType(str, Enum):
    """Category of a farming task."""

    WATERING = "watering"
    FERTILIZER = "fertilizer"
    PEST = "pest"
    DISEASE = "disease"
    FIELD = "field"
    HARVEST = "harvest"
    GENERAL = "general"


class TimeOfDay(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"


class PlanStatus(str, Enum):
    """Lifecycle status of a farming plan."""

    ACTIVE = "active"
    COMPLETED = "completed"


class PlanSource(str, Enum):
    """Which generator produced the plan content."""

    HEURISTIC = "heuristic"
    GEMINI = "gemini"


class LocalizedText(BaseModel):
    """Text in every supported language. Blank entries count as missing."""

    en: Optional[str] = Field(default=None, description="English text.")
    hi: Optional[str] = Field(default=None, description="Hindi text.")
    bn: Optional[str] = Field(default=None, description="Bengali text.")

    def is_usable(self) -> bool:
        return any((value or "").strip() for value in (self.en, self.hi, self.bn))


class WateringRule(BaseModel):
    """Irrigation every `every_days` days between two offsets from planting."""

    start_day: int = Field(ge=0, description="Days after planting of the first irrigation (0 = planting day).")
    end_day: int = Field(ge=0, description="Last day offset covered by the rule, inclusive.")
    every_days: int = Field(
        ge=1,
        description=f"Stride between irrigations. {DISABLED_STRIDE_DAYS} or more marks a stop-irrigation rule.",
    )
    time_of_day: Optional[TimeOfDay] = Field(default=None)
    time_hhmm: Optional[str] = Field(default=None, description="Clock time as HH:mm.")
    title: Optional[str] = Field(default=None, description="Neutral (English) title.")
    title_i18n: Optional[LocalizedText] = Field(default=None)
    notes: Optional[str] = Field(default=None, description="Neutral (English) notes.")
    notes_i18n: Optional[LocalizedText] = Field(default=None)


class RecurringTaskRule(BaseModel):
    """A task repeated every `every_days` days between two offsets from planting."""

    id: str = Field(description="Stable identifier derived from type and title.")
    type: TaskType = Field(default=TaskType.GENERAL)
    title: str = Field(description="Neutral (English) title.")
    title_i18n: Optional[LocalizedText] = Field(default=None)
    start_day: int = Field(ge=0)
    end_day: int = Field(ge=0)
    every_days: int = Field(ge=1)
    time_of_day: Optional[TimeOfDay] = Field(default=None)
    time_hhmm: Optional[str] = Field(default=None)
    notes: Optional[str] = Field(default=None)
    notes_i18n: Optional[LocalizedText] = Field(default=None)


class OneOffTask(BaseModel):
    """A milestone task on an absolute date."""

    id: str
    type: TaskType = Field(default=TaskType.GENERAL)
    title: str
    title_i18n: Optional[LocalizedText] = Field(default=None)
    due_date: str = Field(description="Due date as YYYY-MM-DD.")
    time_of_day: Optional[TimeOfDay] = Field(default=None)
    time_hhmm: Optional[str] = Field(default=None)
    notes: Optional[str] = Field(default=None)
    notes_i18n: Optional[LocalizedText] = Field(default=None)


class FarmingPlan(BaseModel):
    """One crop-planting cycle and the rules its calendar is expanded from."""

    id: str = Field(description="Deterministic id from crop, planting date and area.")
    user_id: str = Field(description="Owner of the plan.")
    crop_type: str
    crop_name: str
    area_acres: float = Field(gt=0)
    plan_title: Optional[LocalizedText] = Field(default=None)
    plan_overview: Optional[LocalizedText] = Field(default=None)
    planting_date: str = Field(description="Planting date as YYYY-MM-DD.")
    expected_harvest_date: str = Field(description="Expected harvest date as YYYY-MM-DD.")
    cleanup_date: str = Field(description="Day after harvest; the plan is deleted once this has passed.")
    watering_rules: List[WateringRule] = Field(default_factory=list)
    recurring_tasks: List[RecurringTaskRule] = Field(default_factory=list)
    tasks: List[OneOffTask] = Field(default_factory=list)
    status: PlanStatus = Field(default=PlanStatus.ACTIVE)
    source: Optional[PlanSource] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
    generated_at: Optional[datetime] = Field(default=None)
    generation_attempted_at: Optional[datetime] = Field(default=None)
    generation_error: Optional[str] = Field(default=None)

    def has_generated_content(self) -> bool:
        return (
            self.plan_title is not None
            and self.plan_title.is_usable()
            and self.plan_overview is not None
            and self.plan_overview.is_usable()
        )


class TaskInstance(BaseModel):
    """One dated, localized occurrence of a rule or one-off task. Never stored."""

    plan_id: str
    crop_name: str
    plan_title: Optional[str] = None
    plan_expected_harvest_date: Optional[str] = None
    type: TaskType
    title: str
    due_date: str
    time_of_day: TimeOfDay
    time_hhmm: str
    notes: Optional[str] = None

    def dedup_key(self) -> tuple:
        return (self.plan_id, self.due_date, self.title)


class TaskInstanceDetailed(TaskInstance):
    water_amount_hint: Optional[str] = Field(
        default=None, description="Irrigation amount parsed from the notes, e.g. '10-15 mm'."
    )


class FarmingPlanSummary(BaseModel):
    """Plan card for the plan list, with a preview of the next 7 days."""

    id: str
    crop_name: str
    crop_type: str
    area_acres: float
    planting_date: str
    expected_harvest_date: str
    status: PlanStatus
    plan_title: str
    plan_overview: Optional[str] = None
    source: Optional[PlanSource] = None
    updated_at: Optional[str] = None
    next_task_date: Optional[str] = None
    next_task_title: Optional[str] = None
    next_task_count_in_7_days: int = 0


class FarmingPlanCreate(BaseModel):
    crop_type: str = Field(description="Crop family or type, e.g. 'rice'.")
    crop_name: Optional[str] = Field(default=None, description="Display name; defaults to the crop type.")
    area_acres: float = Field(description="Cultivated area in acres, must be positive.")
    planting_date: str = Field(description="YYYY-MM-DD or DD/MM/YYYY.")
    expected_harvest_date: Optional[str] = Field(default=None, description="YYYY-MM-DD or DD/MM/YYYY.")


class GeneratedLocalizedText(BaseModel):
    en: str = Field(description="English text.")
    hi: str = Field(description="Hindi text.")
    bn: str = Field(description="Bengali text.")


class GeneratedWateringRule(BaseModel):
    start_day: int = Field(description="Days after planting when this irrigation pattern starts (0 = planting day).")
    end_day: int = Field(description="Last day after planting covered by this pattern, inclusive.")
    every_days: int = Field(description="Interval in days between irrigations (2 = every 2 days).")
    time_of_day: Optional[TimeOfDay] = Field(default=None)
    time_hhmm: Optional[str] = Field(default=None, description="Clock time as HH:mm.")
    title: Optional[GeneratedLocalizedText] = Field(default=None)
    notes: Optional[GeneratedLocalizedText] = Field(default=None)


class GeneratedRecurringTask(BaseModel):
    type: str = Field(description="One of watering, fertilizer, pest, disease, field, harvest, general.")
    start_day: int = Field(description="Days after planting of the first occurrence.")
    end_day: int = Field(description="Last day after planting covered by this task, inclusive.")
    every_days: int = Field(description="Interval in days between repetitions (7 = weekly).")
    time_of_day: Optional[TimeOfDay] = Field(default=None)
    time_hhmm: Optional[str] = Field(default=None)
    title: GeneratedLocalizedText
    notes: Optional[GeneratedLocalizedText] = Field(default=None)


class GeneratedOneOffTask(BaseModel):
    type: str = Field(description="One of watering, fertilizer, pest, disease, field, harvest, general.")
    due_date: str = Field(description="Due date as YYYY-MM-DD.")
    time_of_day: Optional[TimeOfDay] = Field(default=None)
    time_hhmm: Optional[str] = Field(default=None)
    title: GeneratedLocalizedText
    notes: Optional[GeneratedLocalizedText] = Field(default=None)


class GeneratedFarmingPlan(BaseModel):
    """Structured farming schedule returned by the generative model."""

    title: GeneratedLocalizedText = Field(description="Plan title in English, Hindi and Bengali.")
    overview: GeneratedLocalizedText = Field(description="Plan overview in English, Hindi and Bengali.")
    planting_date: str = Field(description="Planting date as YYYY-MM-DD.")
    expected_harvest_date: str = Field(description="Expected harvest date as YYYY-MM-DD, after the planting date.")
    watering_rules: List[GeneratedWateringRule] = Field(default_factory=list)
    recurring_tasks: List[GeneratedRecurringTask] = Field(default_factory=list)
    one_off_tasks: List[GeneratedOneOffTask] = Field(default_factory=list)
