from scenario_sim.models.scenario import Scenario
from scenario_sim.models.session import ScenarioSession, SessionStatus
from scenario_sim.models.decision import Decision

__all__ = ["Scenario", "ScenarioSession", "SessionStatus", "Decision"]
