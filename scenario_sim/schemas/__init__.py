from scenario_sim.schemas.evaluation import EvaluationRequest, FeedbackRequest, HistoryEntry, Verdict
from scenario_sim.schemas.scenario import ScenarioListSchema, ScenarioOutSchema
from scenario_sim.schemas.session import (
    CompletionSchema,
    DecisionResultSchema,
    DecisionSchema,
    DecisionSubmitSchema,
    SessionCreatedSchema,
    SessionListSchema,
    SessionOutSchema,
    SessionSummarySchema,
)

__all__ = [
    "CompletionSchema",
    "DecisionResultSchema",
    "DecisionSchema",
    "DecisionSubmitSchema",
    "EvaluationRequest",
    "FeedbackRequest",
    "HistoryEntry",
    "ScenarioListSchema",
    "ScenarioOutSchema",
    "SessionCreatedSchema",
    "SessionListSchema",
    "SessionOutSchema",
    "SessionSummarySchema",
    "Verdict",
]
