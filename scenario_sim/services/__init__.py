from scenario_sim.services.controller import DecisionOutcome, SessionController
from scenario_sim.services.scoring import final_score, running_score
from scenario_sim.services.seeding import seed_scenarios

__all__ = ["DecisionOutcome", "SessionController", "final_score", "running_score", "seed_scenarios"]
