from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from agroplan.collections.farming_plan import MongoFarmingPlanStore
from agroplan.core.config import settings
from agroplan.core.genai_client import is_genai_configured
from agroplan.core.security import get_current_user_id
from agroplan.models.farming_plan import (
    FarmingPlan,
    FarmingPlanCreate,
    FarmingPlanSummary,
    TaskInstance,
    TaskInstanceDetailed,
)
from agroplan.services.farming_plan_service import FarmingPlanManager
from agroplan.services.plan_generator import GeminiPlanGenerator

router = APIRouter(prefix="/farming-plans", tags=["Farming Plan"])

_manager: Optional[FarmingPlanManager] = None


def get_farming_plan_manager() -> FarmingPlanManager:
    global _manager
    if _manager is None:
        _manager = FarmingPlanManager(
            store=MongoFarmingPlanStore(),
            generator=GeminiPlanGenerator() if is_genai_configured() else None,
            timeout_seconds=settings.PLAN_GENERATION_TIMEOUT_SECONDS,
        )
    return _manager


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Create a farming plan or reuse the existing one",
)
async def create_farming_plan(
    request: FarmingPlanCreate,
    user_id: str = Depends(get_current_user_id),
    manager: FarmingPlanManager = Depends(get_farming_plan_manager),
):
    """
    Create the plan for a crop, planting date and area. Repeating the same
    request returns the same plan id without generating the plan again.
    """
    plan_id = await manager.create_or_reuse(
        user_id,
        crop_type=request.crop_type,
        crop_name=request.crop_name,
        area_acres=request.area_acres,
        planting_date=request.planting_date,
        expected_harvest_date=request.expected_harvest_date,
    )
    return {"plan_id": plan_id}


@router.get(
    "",
    response_model=List[FarmingPlanSummary],
    summary="List active farming plans",
    response_model_exclude_none=True,
)
async def list_farming_plans(
    language: Optional[str] = None,
    user_id: str = Depends(get_current_user_id),
    manager: FarmingPlanManager = Depends(get_farming_plan_manager),
):
    return await manager.get_active_plan_summaries(user_id, language=language)


@router.get(
    "/upcoming",
    response_model=List[TaskInstance],
    summary="Upcoming tasks across all active plans",
    response_model_exclude_none=True,
)
async def get_upcoming_tasks(
    window_days: int = Query(default=7),
    language: Optional[str] = None,
    user_id: str = Depends(get_current_user_id),
    manager: FarmingPlanManager = Depends(get_farming_plan_manager),
):
    return await manager.get_upcoming(user_id, window_days=window_days, language=language)


@router.delete("/expired", summary="Delete plans whose season is over")
async def delete_expired_plans(
    user_id: str = Depends(get_current_user_id),
    manager: FarmingPlanManager = Depends(get_farming_plan_manager),
):
    deleted = await manager.cleanup_expired(user_id)
    return {"deleted": deleted}


@router.get(
    "/{plan_id}",
    response_model=FarmingPlan,
    summary="Get a farming plan by its ID",
    response_model_exclude_none=True,
)
async def get_farming_plan(
    plan_id: str,
    user_id: str = Depends(get_current_user_id),
    manager: FarmingPlanManager = Depends(get_farming_plan_manager),
):
    plan = await manager.get_plan(user_id, plan_id)
    if not plan:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Farming plan with ID '{plan_id}' not found.",
        )
    return plan


@router.get(
    "/{plan_id}/tasks",
    response_model=List[TaskInstance],
    summary="Tasks of a plan within a date range",
    response_model_exclude_none=True,
)
async def get_plan_tasks(
    plan_id: str,
    start: str,
    end: str,
    language: Optional[str] = None,
    user_id: str = Depends(get_current_user_id),
    manager: FarmingPlanManager = Depends(get_farming_plan_manager),
):
    """
    Expand the plan's rules into dated tasks between `start` and `end`
    (inclusive). An unknown plan yields an empty list.
    """
    return await manager.get_tasks_in_range(user_id, plan_id, start, end, language)


@router.get(
    "/{plan_id}/tasks/{day}",
    response_model=List[TaskInstanceDetailed],
    summary="Tasks of a plan on one day",
    response_model_exclude_none=True,
)
async def get_plan_tasks_on_date(
    plan_id: str,
    day: str,
    language: Optional[str] = None,
    user_id: str = Depends(get_current_user_id),
    manager: FarmingPlanManager = Depends(get_farming_plan_manager),
):
    return await manager.get_tasks_on_date(user_id, plan_id, day, language)
