import asyncio
from datetime import datetime
from typing import Dict, List, Optional, Tuple

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from agroplan.api.rest_routes.farming_plan import get_farming_plan_manager
from agroplan.core.security import get_current_user_id
from agroplan.main import app
from agroplan.models.farming_plan import FarmingPlan, PlanSource, PlanStatus
from agroplan.services.farming_plan_service import FarmingPlanManager
from agroplan.services.plan_generator import (
    GeneratedPlanContent,
    PlanGenerationError,
    PlanGenerationRequest,
    PlanGenerator,
    build_heuristic_plan,
)

TEST_USER_ID = "user-1"


class InMemoryFarmingPlanStore:
    """Dict-backed FarmingPlanStore with the same conditional-write rules as the Mongo store."""

    def __init__(self) -> None:
        self.plans: Dict[Tuple[str, str], FarmingPlan] = {}

    async def get(self, user_id: str, plan_id: str) -> Optional[FarmingPlan]:
        plan = self.plans.get((user_id, plan_id))
        return plan.model_copy(deep=True) if plan else None

    async def put(self, plan: FarmingPlan, only_if_content_missing: bool = False) -> bool:
        key = (plan.user_id, plan.id)
        existing = self.plans.get(key)
        if only_if_content_missing and existing is not None and existing.plan_title is not None:
            return False
        self.plans[key] = plan.model_copy(deep=True)
        return True

    async def claim_generation(self, plan: FarmingPlan) -> bool:
        key = (plan.user_id, plan.id)
        existing = self.plans.get(key)
        if existing is not None and existing.generation_attempted_at is not None:
            return False
        self.plans[key] = plan.model_copy(deep=True)
        return True

    async def list_active(self, user_id: str) -> List[FarmingPlan]:
        return [
            plan.model_copy(deep=True)
            for (owner, _), plan in self.plans.items()
            if owner == user_id and plan.status == PlanStatus.ACTIVE
        ]

    async def delete_expired(self, user_id: str, today_iso: str) -> int:
        expired = [
            key
            for key, plan in self.plans.items()
            if key[0] == user_id and plan.cleanup_date < today_iso
        ]
        for key in expired:
            del self.plans[key]
        return len(expired)


class CountingGenerator(PlanGenerator):
    """Stands in for Gemini: returns the heuristic schedule tagged as generated."""

    source = PlanSource.GEMINI

    def __init__(self, delay: float = 0) -> None:
        self.calls = 0
        self.delay = delay

    async def generate(self, request: PlanGenerationRequest) -> GeneratedPlanContent:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        content = build_heuristic_plan(
            crop_type=request.crop_type,
            crop_name=request.crop_name,
            area_acres=request.area_acres,
            planting_date=request.planting_date,
            expected_harvest_date=request.expected_harvest_date,
        )
        return content.model_copy(update={"source": PlanSource.GEMINI})


class FailingGenerator(PlanGenerator):
    source = PlanSource.GEMINI

    def __init__(self) -> None:
        self.calls = 0

    async def generate(self, request: PlanGenerationRequest) -> GeneratedPlanContent:
        self.calls += 1
        raise PlanGenerationError("model returned garbage")


class SlowGenerator(CountingGenerator):
    def __init__(self) -> None:
        super().__init__(delay=5)


def build_plan(**overrides) -> FarmingPlan:
    data = dict(
        id="tomato-2024-01-01-a1",
        user_id=TEST_USER_ID,
        crop_type="tomato",
        crop_name="Tomato",
        area_acres=1.0,
        planting_date="2024-01-01",
        expected_harvest_date="2024-04-01",
        cleanup_date="2024-04-02",
        updated_at=datetime(2024, 1, 1),
    )
    data.update(overrides)
    return FarmingPlan(**data)


@pytest.fixture
def make_plan():
    return build_plan


@pytest.fixture
def store() -> InMemoryFarmingPlanStore:
    return InMemoryFarmingPlanStore()


@pytest.fixture
def manager(store: InMemoryFarmingPlanStore) -> FarmingPlanManager:
    return FarmingPlanManager(store=store)


@pytest_asyncio.fixture
async def client(manager: FarmingPlanManager):
    app.dependency_overrides[get_farming_plan_manager] = lambda: manager
    app.dependency_overrides[get_current_user_id] = lambda: TEST_USER_ID

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def counting_generator() -> CountingGenerator:
    return CountingGenerator()


@pytest.fixture
def failing_generator() -> FailingGenerator:
    return FailingGenerator()


@pytest.fixture
def slow_generator() -> SlowGenerator:
    return SlowGenerator()
