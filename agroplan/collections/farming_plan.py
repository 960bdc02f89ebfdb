import logging
from typing import List, Optional, Protocol

from motor.motor_asyncio import AsyncIOMotorCollection
from pydantic import ValidationError
from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError

from agroplan.core.mongodb import get_farming_plan_collection
from agroplan.models.farming_plan import FarmingPlan, PlanStatus

logger = logging.getLogger(__name__)


class PlanStoreUnavailableError(Exception):
    """The plan store could not be reached. Safe to retry."""


class FarmingPlanStore(Protocol):
    async def get(self, user_id: str, plan_id: str) -> Optional[FarmingPlan]: ...

    async def put(self, plan: FarmingPlan, only_if_content_missing: bool = False) -> bool: ...

    async def claim_generation(self, plan: FarmingPlan) -> bool: ...

    async def list_active(self, user_id: str) -> List[FarmingPlan]: ...

    async def delete_expired(self, user_id: str, today_iso: str) -> int: ...


def _document_key(user_id: str, plan_id: str) -> str:
    return f"{user_id}:{plan_id}"


def _payload(plan: FarmingPlan) -> dict:
    payload = plan.model_dump(mode="json", exclude_none=True)
    payload["_id"] = _document_key(plan.user_id, plan.id)
    return payload


class MongoFarmingPlanStore:
    """Farming plans in the `farming_plan` collection, one document per user and plan id."""

    def __init__(self, collection: Optional[AsyncIOMotorCollection] = None) -> None:
        self._collection = collection

    @property
    def collection(self) -> AsyncIOMotorCollection:
        if self._collection is None:
            self._collection = get_farming_plan_collection()
        return self._collection

    async def ensure_indexes(self) -> None:
        try:
            await self.collection.create_index([("user_id", ASCENDING), ("status", ASCENDING)])
            await self.collection.create_index([("user_id", ASCENDING), ("cleanup_date", ASCENDING)])
        except PyMongoError as e:
            raise PlanStoreUnavailableError(str(e)) from e

    async def get(self, user_id: str, plan_id: str) -> Optional[FarmingPlan]:
        try:
            response = await self.collection.find_one({"_id": _document_key(user_id, plan_id)})
        except PyMongoError as e:
            raise PlanStoreUnavailableError(str(e)) from e
        return FarmingPlan.model_validate(response) if response else None

    async def put(self, plan: FarmingPlan, only_if_content_missing: bool = False) -> bool:
        """
        Upsert the plan. With `only_if_content_missing` the write is skipped
        (returns False) when the stored plan already has a generated title.
        """
        key = _document_key(plan.user_id, plan.id)
        query = {"_id": key}
        if only_if_content_missing:
            query["plan_title"] = {"$exists": False}
        try:
            await self.collection.replace_one(query, _payload(plan), upsert=True)
        except DuplicateKeyError:
            return False
        except PyMongoError as e:
            raise PlanStoreUnavailableError(str(e)) from e
        return True

    async def claim_generation(self, plan: FarmingPlan) -> bool:
        """
        Record a generation attempt unless one is already recorded.

        The filter only matches a document without `generation_attempted_at`;
        when the document exists with it set, the upsert collides on `_id`
        and the caller has lost the claim.
        """
        key = _document_key(plan.user_id, plan.id)
        payload = _payload(plan)
        payload.pop("_id")
        try:
            await self.collection.update_one(
                {"_id": key, "generation_attempted_at": {"$exists": False}},
                {"$set": payload},
                upsert=True,
            )
        except DuplicateKeyError:
            return False
        except PyMongoError as e:
            raise PlanStoreUnavailableError(str(e)) from e
        return True

    async def list_active(self, user_id: str) -> List[FarmingPlan]:
        try:
            items = [
                item
                async for item in self.collection.find(
                    {"user_id": user_id, "status": PlanStatus.ACTIVE.value}
                )
            ]
        except PyMongoError as e:
            raise PlanStoreUnavailableError(str(e)) from e

        plans = []
        for item in items:
            try:
                plans.append(FarmingPlan.model_validate(item))
            except ValidationError:
                logger.warning("Skipping malformed farming plan document %s", item.get("_id"))
        return plans

    async def delete_expired(self, user_id: str, today_iso: str) -> int:
        try:
            result = await self.collection.delete_many(
                {"user_id": user_id, "cleanup_date": {"$lt": today_iso}}
            )
        except PyMongoError as e:
            raise PlanStoreUnavailableError(str(e)) from e
        return result.deleted_count
