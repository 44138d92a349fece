"""Scenario Session Engine - FastAPI app entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from scenario_sim.core.config import get_settings
from scenario_sim.core.logging import setup_logging
from scenario_sim.db.base import Base
from scenario_sim.db.session import engine, AsyncSessionLocal
from scenario_sim.routers import api
from scenario_sim.services.seeding import seed_scenarios

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level, settings.log_file)

    # create tables (migrations are managed by alembic in deployed environments)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    if settings.seed_on_startup:
        async with AsyncSessionLocal() as db:
            await seed_scenarios(db)

    logger.info("%s started", settings.app_name)
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Interactive legal-training scenario sessions",
    lifespan=lifespan,
)

app.include_router(api.router)


@app.get("/health")
async def health():
    return {"status": "ok"}
