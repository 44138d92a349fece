"""SQLAlchemy declarative base and model imports for Alembic."""
from scenario_sim.db.session import Base

# Import all models so Alembic can see them
from scenario_sim.models.decision import Decision  # noqa: F401
from scenario_sim.models.scenario import Scenario  # noqa: F401
from scenario_sim.models.session import ScenarioSession  # noqa: F401

__all__ = ["Base", "Scenario", "ScenarioSession", "Decision"]
