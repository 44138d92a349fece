"""Scenario catalog lookups. Snapshots are immutable and cached per scenario id."""
from dataclasses import dataclass

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from scenario_sim.models.scenario import Scenario

ALL_BRANCHES = "All"

# A scenario without steps could never advance a session
_PLAYABLE = (Scenario.is_active.is_(True), Scenario.total_steps > 0)


@dataclass(frozen=True)
class ScenarioSnapshot:
    id: int
    title: str
    description: str
    narrative_text: str
    total_steps: int
    estimated_minutes: int
    category: str
    difficulty: str
    branch: str

    @classmethod
    def from_model(cls, scenario: Scenario) -> "ScenarioSnapshot":
        return cls(
            id=scenario.id,
            title=scenario.title,
            description=scenario.description or "",
            narrative_text=scenario.narrative_text,
            total_steps=scenario.total_steps,
            estimated_minutes=scenario.estimated_minutes,
            category=scenario.category,
            difficulty=scenario.difficulty,
            branch=scenario.branch,
        )


# Process-wide: a scenario's rules must not change under a running session
_SNAPSHOT_CACHE: dict[int, ScenarioSnapshot] = {}


def clear_cache() -> None:
    _SNAPSHOT_CACHE.clear()


class ScenarioCatalog:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def fetch_scenario(self, scenario_id: int) -> ScenarioSnapshot | None:
        """Return the playable scenario, or None when it is missing or not playable."""
        cached = _SNAPSHOT_CACHE.get(scenario_id)
        if cached is not None:
            return cached
        result = await self.db.execute(
            select(Scenario).where(Scenario.id == scenario_id, *_PLAYABLE)
        )
        scenario = result.scalar_one_or_none()
        if scenario is None:
            return None
        snapshot = ScenarioSnapshot.from_model(scenario)
        _SNAPSHOT_CACHE[scenario_id] = snapshot
        return snapshot

    async def list_scenarios(
        self,
        category: str | None = None,
        difficulty: str | None = None,
        branch: str | None = None,
    ) -> list[ScenarioSnapshot]:
        """Playable scenarios, newest first. A branch filter also matches branch-agnostic scenarios."""
        query = select(Scenario).where(*_PLAYABLE)
        if category:
            query = query.where(Scenario.category == category)
        if difficulty:
            query = query.where(Scenario.difficulty == difficulty)
        if branch:
            query = query.where(or_(Scenario.branch == branch, Scenario.branch == ALL_BRANCHES))
        result = await self.db.execute(query.order_by(Scenario.created_at.desc(), Scenario.id.desc()))
        return [ScenarioSnapshot.from_model(s) for s in result.scalars().all()]
