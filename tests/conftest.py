import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from scenario_sim.db.base import Base
from scenario_sim.models.scenario import Scenario
from scenario_sim.services import catalog
from scenario_sim.services.catalog import ScenarioCatalog
from scenario_sim.services.controller import SessionController
from scenario_sim.services.evaluator import EvaluatorAdapter
from scenario_sim.services.store import SessionStore
from tests.fakes import ScriptedBackend

OWNER = "owner-1"


def make_scenario(**overrides) -> Scenario:
    data = {
        "title": "Article 15 at the Motor Pool",
        "description": "NJP after a vehicle accident.",
        "narrative_text": "You backed a tactical vehicle into a fuel point. Your commander offers an Article 15.",
        "total_steps": 5,
        "estimated_minutes": 15,
        "category": "Administrative Actions",
        "difficulty": "beginner",
        "branch": "Army",
        "is_active": True,
    }
    data.update(overrides)
    return Scenario(**data)


@pytest.fixture(autouse=True)
def _clear_scenario_cache():
    catalog.clear_cache()
    yield
    catalog.clear_cache()


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'engine.db'}", poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as db:
        yield db


@pytest_asyncio.fixture
async def scenario(db) -> Scenario:
    scenario = make_scenario()
    db.add(scenario)
    await db.commit()
    return scenario


@pytest.fixture
def backend() -> ScriptedBackend:
    return ScriptedBackend()


def build_controller(db, backend, timeout: float = 1.0, max_retries: int = 1) -> SessionController:
    return SessionController(
        store=SessionStore(db),
        catalog=ScenarioCatalog(db),
        evaluator=EvaluatorAdapter(backend, timeout=timeout, max_retries=max_retries),
    )


@pytest.fixture
def controller(db, backend) -> SessionController:
    return build_controller(db, backend)
