import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from agroplan.api.rest_routes.farming_plan import router as farming_plan_router
from agroplan.collections.farming_plan import (
    MongoFarmingPlanStore,
    PlanStoreUnavailableError,
)
from agroplan.core.config import settings
from agroplan.core.mongodb import close_mongo_client, init_mongo_client
from agroplan.services.farming_plan_service import PlanValidationError

load_dotenv()
logging.basicConfig(level=settings.LOG_LEVEL)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_mongo_client()
    try:
        await MongoFarmingPlanStore().ensure_indexes()
    except PlanStoreUnavailableError:
        logger.exception("Could not create farming plan indexes")
    yield
    await close_mongo_client()


app = FastAPI(lifespan=lifespan)

app.include_router(farming_plan_router)


@app.exception_handler(PlanValidationError)
async def plan_validation_error_handler(request: Request, exc: PlanValidationError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": str(exc)},
    )


@app.exception_handler(PlanStoreUnavailableError)
async def plan_store_unavailable_handler(request: Request, exc: PlanStoreUnavailableError):
    logger.error("Farming plan store unavailable: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Farming plan storage is temporarily unavailable."},
    )


@app.get("/")
async def root():
    return {"message": "Welcome to the Kisan Seva AI farming planner!"}
