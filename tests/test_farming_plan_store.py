from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

from agroplan.collections.farming_plan import MongoFarmingPlanStore, PlanStoreUnavailableError
from agroplan.models.farming_plan import LocalizedText

KEY = "user-1:tomato-2024-01-01-a1"


@pytest.fixture
def collection():
    collection = MagicMock()
    collection.find_one = AsyncMock(return_value=None)
    collection.replace_one = AsyncMock()
    collection.update_one = AsyncMock()
    collection.delete_many = AsyncMock(return_value=MagicMock(deleted_count=0))
    collection.create_index = AsyncMock()
    return collection


@pytest.fixture
def mongo_store(collection):
    return MongoFarmingPlanStore(collection=collection)


async def test_claim_is_conditional_upsert(mongo_store, collection, make_plan):
    plan = make_plan(generation_attempted_at="2024-01-01T08:00:00")

    assert await mongo_store.claim_generation(plan) is True

    query, update = collection.update_one.await_args.args
    assert query == {"_id": KEY, "generation_attempted_at": {"$exists": False}}
    assert "_id" not in update["$set"]
    assert update["$set"]["generation_attempted_at"] == "2024-01-01T08:00:00"
    assert collection.update_one.await_args.kwargs == {"upsert": True}


async def test_second_claim_is_lost(mongo_store, collection, make_plan):
    collection.update_one.side_effect = DuplicateKeyError("E11000 duplicate key error")

    assert await mongo_store.claim_generation(make_plan()) is False


async def test_conditional_put_requires_missing_title(mongo_store, collection, make_plan):
    assert await mongo_store.put(make_plan(), only_if_content_missing=True) is True

    query, document = collection.replace_one.await_args.args
    assert query == {"_id": KEY, "plan_title": {"$exists": False}}
    assert document["_id"] == KEY
    assert "plan_title" not in document


async def test_conditional_put_over_titled_plan_is_skipped(mongo_store, collection, make_plan):
    collection.replace_one.side_effect = DuplicateKeyError("E11000 duplicate key error")

    written = await mongo_store.put(
        make_plan(plan_title=LocalizedText(en="Tomato plan")), only_if_content_missing=True
    )

    assert written is False


async def test_unconditional_put_matches_on_key_only(mongo_store, collection, make_plan):
    assert await mongo_store.put(make_plan()) is True

    query, _ = collection.replace_one.await_args.args
    assert query == {"_id": KEY}
    assert collection.replace_one.await_args.kwargs == {"upsert": True}


async def test_get_validates_stored_document(mongo_store, collection, make_plan):
    document = make_plan().model_dump(mode="json", exclude_none=True)
    document["_id"] = KEY
    collection.find_one.return_value = document

    plan = await mongo_store.get("user-1", "tomato-2024-01-01-a1")

    collection.find_one.assert_awaited_once_with({"_id": KEY})
    assert plan.id == "tomato-2024-01-01-a1"
    assert plan.crop_name == "Tomato"


async def test_get_missing_plan_returns_none(mongo_store):
    assert await mongo_store.get("user-1", "unknown") is None


@pytest.mark.parametrize("method", ["get", "claim_generation", "put"])
async def test_driver_errors_become_store_unavailable(mongo_store, collection, make_plan, method):
    error = ServerSelectionTimeoutError("No servers found")
    collection.find_one.side_effect = error
    collection.update_one.side_effect = error
    collection.replace_one.side_effect = error

    call = {
        "get": lambda: mongo_store.get("user-1", "tomato-2024-01-01-a1"),
        "claim_generation": lambda: mongo_store.claim_generation(make_plan()),
        "put": lambda: mongo_store.put(make_plan(), only_if_content_missing=True),
    }[method]

    with pytest.raises(PlanStoreUnavailableError):
        await call()


async def test_list_active_skips_malformed_documents(mongo_store, collection, make_plan):
    good = make_plan().model_dump(mode="json", exclude_none=True)
    good["_id"] = KEY
    cursor = MagicMock()
    cursor.__aiter__.return_value = [good, {"_id": "user-1:broken", "user_id": "user-1"}]
    collection.find.return_value = cursor

    plans = await mongo_store.list_active("user-1")

    collection.find.assert_called_once_with({"user_id": "user-1", "status": "active"})
    assert [plan.id for plan in plans] == ["tomato-2024-01-01-a1"]


async def test_delete_expired_filters_on_cleanup_date(mongo_store, collection):
    collection.delete_many.return_value = MagicMock(deleted_count=2)

    assert await mongo_store.delete_expired("user-1", "2024-06-01") == 2
    collection.delete_many.assert_awaited_once_with(
        {"user_id": "user-1", "cleanup_date": {"$lt": "2024-06-01"}}
    )


async def test_index_creation_failure_becomes_store_unavailable(mongo_store, collection):
    collection.create_index.side_effect = ServerSelectionTimeoutError("No servers found")

    with pytest.raises(PlanStoreUnavailableError):
        await mongo_store.ensure_indexes()
