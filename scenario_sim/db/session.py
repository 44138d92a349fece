"""Async engine, session factory and declarative base."""
from collections.abc import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from scenario_sim.core.config import get_settings

Base = declarative_base()

settings = get_settings()

engine = create_async_engine(settings.database_url, echo=settings.debug, future=True)

# expire_on_commit=False: projections are built from objects after the commit
AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncIterator[AsyncSession]:
    async with AsyncSessionLocal() as db:
        yield db
