import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from signage.core.logging import configure_logging
from signage.database import create_db_and_tables
from signage.models import daypart_definition, daypart_schedule, placement_group, store  # noqa: F401
from signage.routers import holidays, placement_schedules, stores

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    create_db_and_tables()
    logger.info("database tables ready")
    yield


app = FastAPI(title="Signage Daypart Scheduling", version="0.1", lifespan=lifespan)
app.include_router(stores.router)
app.include_router(placement_schedules.router)
app.include_router(holidays.router)


@app.get("/")
def root():
    return {"message": "Signage daypart scheduling API"}
