from datetime import date, timedelta
from unittest.mock import AsyncMock

import jwt
import pytest
from fastapi import HTTPException
from httpx import ASGITransport, AsyncClient

from agroplan.collections.farming_plan import PlanStoreUnavailableError
from agroplan.core.config import settings
from agroplan.core.security import ALGORITHM, create_access_token, verify_jwt
from agroplan.main import app


async def test_create_plan(client: AsyncClient):
    res = await client.post("/farming-plans", json={
        "crop_type": "rice", "crop_name": "Rice", "area_acres": 2, "planting_date": "2024-06-01"
    })
    assert res.status_code == 201
    assert res.json() == {"plan_id": "rice-2024-06-01-a2"}


async def test_create_plan_is_idempotent(client: AsyncClient):
    payload = {"crop_type": "wheat", "area_acres": 1.5, "planting_date": "10/11/2024"}
    first = await client.post("/farming-plans", json=payload)
    second = await client.post("/farming-plans", json=payload)
    assert first.json()["plan_id"] == second.json()["plan_id"] == "wheat-2024-11-10-a1p5"


async def test_create_plan_validation_error(client: AsyncClient):
    res = await client.post("/farming-plans", json={
        "crop_type": "rice", "area_acres": 0, "planting_date": "2024-06-01"
    })
    assert res.status_code == 422

    res = await client.post("/farming-plans", json={
        "crop_type": "rice", "area_acres": 1, "planting_date": "31/02/2024"
    })
    assert res.status_code == 422
    assert "planting date" in res.json()["detail"]


async def test_get_plan(client: AsyncClient):
    await client.post("/farming-plans", json={
        "crop_type": "rice", "area_acres": 2, "planting_date": "2024-06-01"
    })
    res = await client.get("/farming-plans/rice-2024-06-01-a2")
    assert res.status_code == 200
    data = res.json()
    assert data["expected_harvest_date"] == "2024-09-29"
    assert data["cleanup_date"] == "2024-09-30"
    assert data["source"] == "heuristic"


async def test_get_missing_plan(client: AsyncClient):
    res = await client.get("/farming-plans/nope")
    assert res.status_code == 404


async def test_plan_tasks_in_range_and_on_date(client: AsyncClient):
    await client.post("/farming-plans", json={
        "crop_type": "rice", "area_acres": 2, "planting_date": "2024-06-01"
    })
    res = await client.get(
        "/farming-plans/rice-2024-06-01-a2/tasks",
        params={"start": "2024-06-01", "end": "2024-06-07", "language": "hi"},
    )
    assert res.status_code == 200
    tasks = res.json()
    assert tasks
    assert all("2024-06-01" <= task["due_date"] <= "2024-06-07" for task in tasks)
    assert tasks == sorted(tasks, key=lambda task: (task["due_date"], task["title"]))

    res = await client.get("/farming-plans/rice-2024-06-01-a2/tasks/01-06-2024")
    assert res.status_code == 200
    assert {task["type"] for task in res.json()} >= {"fertilizer", "watering"}


async def test_plan_tasks_with_bad_dates(client: AsyncClient):
    res = await client.get(
        "/farming-plans/any/tasks", params={"start": "soon", "end": "2024-06-07"}
    )
    assert res.status_code == 422


async def test_upcoming_and_summaries(client: AsyncClient):
    today = date.today()
    await client.post("/farming-plans", json={
        "crop_type": "tomato", "area_acres": 1, "planting_date": today.isoformat()
    })

    res = await client.get("/farming-plans/upcoming", params={"window_days": 3})
    assert res.status_code == 200
    upcoming = res.json()
    assert upcoming
    assert upcoming[0]["due_date"] == today.isoformat()

    res = await client.get("/farming-plans", params={"language": "bn"})
    assert res.status_code == 200
    summaries = res.json()
    assert len(summaries) == 1
    assert summaries[0]["next_task_date"] == today.isoformat()
    assert summaries[0]["plan_title"].endswith("চাষ পরিকল্পনা")


async def test_delete_expired(client: AsyncClient):
    planted = date.today() - timedelta(days=200)
    await client.post("/farming-plans", json={
        "crop_type": "tomato", "area_acres": 1, "planting_date": planted.isoformat()
    })
    res = await client.delete("/farming-plans/expired")
    assert res.status_code == 200
    assert res.json() == {"deleted": 1}

    res = await client.delete("/farming-plans/expired")
    assert res.json() == {"deleted": 0}


async def test_store_unavailable_maps_to_503(client: AsyncClient, store):
    store.get = AsyncMock(side_effect=PlanStoreUnavailableError("connection refused"))
    res = await client.get("/farming-plans/rice-2024-06-01-a2")
    assert res.status_code == 503


async def test_requests_require_a_token():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        res = await c.get("/farming-plans")
    assert res.status_code == 401


async def test_token_round_trip(monkeypatch):
    monkeypatch.setattr(settings, "JWT_SECRET_KEY", "a-test-secret-that-is-long-enough-for-hs256")
    token = create_access_token({"sub": "user-42"})
    payload = await verify_jwt(token)
    assert payload["sub"] == "user-42"

    forged = jwt.encode({"sub": "user-42"}, "another-secret-that-is-long-enough-too", algorithm=ALGORITHM)
    with pytest.raises(HTTPException) as exc_info:
        await verify_jwt(forged)
    assert exc_info.value.status_code == 401
