import asyncio
import logging
import math
from datetime import date, datetime
from typing import List, Optional, Union

from agroplan.collections.farming_plan import FarmingPlanStore
from agroplan.core.config import settings
from agroplan.models.farming_plan import (
    FarmingPlan,
    FarmingPlanSummary,
    PlanStatus,
    TaskInstance,
    TaskInstanceDetailed,
    TaskType,
)
from agroplan.services.localization import resolve
from agroplan.services.plan_generator import (
    GeneratedPlanContent,
    HeuristicPlanGenerator,
    PlanGenerationRequest,
    PlanGenerator,
    build_plan_id,
    infer_maturity_days,
)
from agroplan.services.task_expansion import (
    expand,
    expand_upcoming,
    extract_water_amount_hint,
    merge_task_instances,
)
from agroplan.utils.calendar import (
    DateParseError,
    add_days,
    parse_loose_date,
    to_iso_day,
    today as current_day,
)

logger = logging.getLogger(__name__)

SUMMARY_PREVIEW_DAYS = 7
_NO_UPCOMING_TASK = "9999-12-31"


class PlanValidationError(ValueError):
    """Plan inputs were rejected before anything was stored."""


def effective_status(plan: FarmingPlan, today: date) -> PlanStatus:
    """A plan is completed once its cleanup date has passed, whatever is stored."""
    if plan.cleanup_date < to_iso_day(today):
        return PlanStatus.COMPLETED
    return plan.status


def _parse_day(value: Union[str, date], label: str) -> date:
    try:
        return parse_loose_date(value)
    except DateParseError as exc:
        raise PlanValidationError(f"Invalid {label}: {exc}") from exc


class FarmingPlanManager:
    """
    Creates farming plans once, answers task queries from their rules and
    sweeps plans whose season is over.

    Generation goes to `generator` at most once per plan id. Without a
    generator, after a recorded attempt, or when that attempt fails, the
    heuristic generator fills the plan in the same call.
    """

    def __init__(
        self,
        store: FarmingPlanStore,
        generator: Optional[PlanGenerator] = None,
        heuristic: Optional[PlanGenerator] = None,
        timeout_seconds: Optional[float] = None,
    ) -> None:
        self.store = store
        self.generator = generator
        self.heuristic = heuristic or HeuristicPlanGenerator()
        self.timeout_seconds = (
            settings.PLAN_GENERATION_TIMEOUT_SECONDS if timeout_seconds is None else timeout_seconds
        )

    @staticmethod
    def validate_inputs(
        crop_type: Optional[str],
        crop_name: Optional[str],
        area_acres: float,
        planting_date: Union[str, date],
        expected_harvest_date: Union[str, date, None] = None,
    ) -> PlanGenerationRequest:
        display_name = (crop_name or crop_type or "").strip()
        crop_type = (crop_type or display_name).strip()
        if not display_name:
            raise PlanValidationError("Crop type or crop name is required.")

        try:
            area = float(area_acres)
        except (TypeError, ValueError) as exc:
            raise PlanValidationError("Area must be a number of acres.") from exc
        if not math.isfinite(area) or area <= 0:
            raise PlanValidationError("Area must be a positive number of acres.")

        planting = _parse_day(planting_date, "planting date")
        harvest = None
        if expected_harvest_date is not None and str(expected_harvest_date).strip():
            harvest = _parse_day(expected_harvest_date, "expected harvest date")
            if harvest <= planting:
                raise PlanValidationError("Expected harvest date must be after the planting date.")

        return PlanGenerationRequest(
            crop_type=crop_type,
            crop_name=display_name,
            area_acres=area,
            planting_date=planting,
            expected_harvest_date=harvest,
        )

    async def create_or_reuse(
        self,
        user_id: str,
        crop_type: Optional[str],
        crop_name: Optional[str],
        area_acres: float,
        planting_date: Union[str, date],
        expected_harvest_date: Union[str, date, None] = None,
    ) -> str:
        request = self.validate_inputs(
            crop_type, crop_name, area_acres, planting_date, expected_harvest_date
        )
        plan_id = build_plan_id(request.crop_name, request.planting_date, request.area_acres)

        existing = await self.store.get(user_id, plan_id)
        if existing is not None and existing.has_generated_content():
            logger.info("Reusing farming plan %s for user %s", plan_id, user_id)
            return plan_id

        if existing is not None and existing.generation_attempted_at is not None:
            logger.info(
                "Generation already attempted for plan %s; using heuristic schedule", plan_id
            )
            await self._save_heuristic(
                user_id,
                plan_id,
                request,
                existing,
                attempted_at=existing.generation_attempted_at,
                error=existing.generation_error,
            )
            return plan_id

        if self.generator is None:
            await self._save_heuristic(user_id, plan_id, request, existing)
            return plan_id

        attempted_at = datetime.utcnow()
        claim = self._placeholder(user_id, plan_id, request, existing, attempted_at)
        if not await self.store.claim_generation(claim):
            winner = await self.store.get(user_id, plan_id)
            logger.info(
                "Plan %s is being generated by another request (content ready: %s)",
                plan_id,
                bool(winner and winner.has_generated_content()),
            )
            return plan_id

        try:
            content = await asyncio.wait_for(
                self.generator.generate(request), timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError:
            error = f"Plan generation timed out after {self.timeout_seconds:g}s"
            logger.warning("%s for plan %s", error, plan_id)
        except Exception as exc:
            error = str(exc) or exc.__class__.__name__
            logger.warning("Plan generation failed for plan %s: %s", plan_id, error)
        else:
            plan = self._compose(
                user_id, plan_id, request, content, claim, attempted_at=attempted_at
            )
            await self.store.put(plan)
            logger.info("Stored generated farming plan %s for user %s", plan_id, user_id)
            return plan_id

        # Only the claim holder reaches this point, so its failure record always lands.
        await self._save_heuristic(
            user_id,
            plan_id,
            request,
            claim,
            attempted_at=attempted_at,
            error=error,
            only_if_content_missing=False,
        )
        return plan_id

    async def _save_heuristic(
        self,
        user_id: str,
        plan_id: str,
        request: PlanGenerationRequest,
        existing: Optional[FarmingPlan],
        attempted_at: Optional[datetime] = None,
        error: Optional[str] = None,
        only_if_content_missing: bool = True,
    ) -> None:
        content = await self.heuristic.generate(request)
        plan = self._compose(
            user_id, plan_id, request, content, existing, attempted_at=attempted_at, error=error
        )
        if await self.store.put(plan, only_if_content_missing=only_if_content_missing):
            logger.info("Stored heuristic farming plan %s for user %s", plan_id, user_id)
        else:
            logger.info("Plan %s already has generated content; heuristic schedule discarded", plan_id)

    @staticmethod
    def _placeholder(
        user_id: str,
        plan_id: str,
        request: PlanGenerationRequest,
        existing: Optional[FarmingPlan],
        attempted_at: datetime,
    ) -> FarmingPlan:
        harvest = request.expected_harvest_date or add_days(
            request.planting_date, infer_maturity_days(request.crop_name)
        )
        return FarmingPlan(
            id=plan_id,
            user_id=user_id,
            crop_type=request.crop_type,
            crop_name=request.crop_name,
            area_acres=request.area_acres,
            planting_date=to_iso_day(request.planting_date),
            expected_harvest_date=to_iso_day(harvest),
            cleanup_date=to_iso_day(add_days(harvest, 1)),
            created_at=existing.created_at if existing else attempted_at,
            updated_at=attempted_at,
            generation_attempted_at=attempted_at,
        )

    @staticmethod
    def _compose(
        user_id: str,
        plan_id: str,
        request: PlanGenerationRequest,
        content: GeneratedPlanContent,
        existing: Optional[FarmingPlan],
        attempted_at: Optional[datetime] = None,
        error: Optional[str] = None,
    ) -> FarmingPlan:
        now = datetime.utcnow()
        return FarmingPlan(
            id=plan_id,
            user_id=user_id,
            crop_type=request.crop_type,
            crop_name=request.crop_name,
            area_acres=request.area_acres,
            plan_title=content.plan_title,
            plan_overview=content.plan_overview,
            planting_date=content.planting_date,
            expected_harvest_date=content.expected_harvest_date,
            cleanup_date=content.cleanup_date,
            watering_rules=content.watering_rules,
            recurring_tasks=content.recurring_tasks,
            tasks=content.tasks,
            status=PlanStatus.ACTIVE,
            source=content.source,
            created_at=existing.created_at if existing else now,
            updated_at=now,
            generated_at=now,
            generation_attempted_at=attempted_at,
            generation_error=error,
        )

    async def get_plan(self, user_id: str, plan_id: str) -> Optional[FarmingPlan]:
        return await self.store.get(user_id, plan_id)

    async def get_tasks_in_range(
        self,
        user_id: str,
        plan_id: str,
        start: Union[str, date],
        end: Union[str, date],
        language: Optional[str] = None,
    ) -> List[TaskInstance]:
        window_start = _parse_day(start, "start date")
        window_end = _parse_day(end, "end date")
        plan = await self.store.get(user_id, plan_id)
        if plan is None:
            return []
        return expand(plan, window_start, window_end, language)

    async def get_tasks_on_date(
        self,
        user_id: str,
        plan_id: str,
        day: Union[str, date],
        language: Optional[str] = None,
    ) -> List[TaskInstanceDetailed]:
        tasks = await self.get_tasks_in_range(user_id, plan_id, day, day, language)
        return [
            TaskInstanceDetailed(
                **task.model_dump(),
                water_amount_hint=(
                    extract_water_amount_hint(task.notes)
                    if task.type == TaskType.WATERING
                    else None
                ),
            )
            for task in tasks
        ]

    async def _active_plans(self, user_id: str, day: date) -> List[FarmingPlan]:
        plans = await self.store.list_active(user_id)
        return [plan for plan in plans if effective_status(plan, day) == PlanStatus.ACTIVE]

    async def get_upcoming(
        self,
        user_id: str,
        window_days: int = 7,
        language: Optional[str] = None,
        today: Optional[date] = None,
    ) -> List[TaskInstance]:
        """Tasks across every active plan from today through today + window_days."""
        day = today or current_day()
        window_days = max(1, int(window_days))
        plans = await self._active_plans(user_id, day)
        return merge_task_instances(
            task
            for plan in plans
            for task in expand_upcoming(plan, window_days, language, today=day)
        )

    async def get_active_plan_summaries(
        self,
        user_id: str,
        language: Optional[str] = None,
        today: Optional[date] = None,
    ) -> List[FarmingPlanSummary]:
        day = today or current_day()
        today_iso = to_iso_day(day)
        summaries = []
        for plan in await self._active_plans(user_id, day):
            upcoming = expand_upcoming(plan, SUMMARY_PREVIEW_DAYS, language, today=day)
            next_task = upcoming[0] if upcoming else None
            summaries.append(
                FarmingPlanSummary(
                    id=plan.id,
                    crop_name=plan.crop_name,
                    crop_type=plan.crop_type,
                    area_acres=plan.area_acres,
                    planting_date=plan.planting_date,
                    expected_harvest_date=plan.expected_harvest_date,
                    status=plan.status,
                    plan_title=resolve(plan.plan_title, language) or plan.crop_name,
                    plan_overview=resolve(plan.plan_overview, language),
                    source=plan.source,
                    updated_at=to_iso_day(plan.updated_at.date()),
                    next_task_date=next_task.due_date if next_task else None,
                    next_task_title=next_task.title if next_task else None,
                    next_task_count_in_7_days=len(upcoming),
                )
            )

        # Stable sorts, least significant key first.
        summaries.sort(key=lambda item: item.plan_title)
        summaries.sort(key=lambda item: item.updated_at or today_iso, reverse=True)
        summaries.sort(
            key=lambda item: (item.next_task_date or _NO_UPCOMING_TASK, item.expected_harvest_date)
        )
        return summaries

    async def cleanup_expired(self, user_id: str, today: Optional[date] = None) -> int:
        """Delete plans whose cleanup date is before today. Safe to repeat."""
        day = today or current_day()
        deleted = await self.store.delete_expired(user_id, to_iso_day(day))
        if deleted:
            logger.info("Deleted %d expired farming plans for user %s", deleted, user_id)
        return deleted
