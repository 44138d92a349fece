"""Pydantic schemas for sessions and decisions: request bodies and read projections."""
from datetime import datetime

from pydantic import Field, field_validator

from scenario_sim.schemas.scenario import APIModel


class DecisionSubmitSchema(APIModel):
    step: int = Field(ge=1)
    input: str = Field(min_length=1, max_length=4000)

    @field_validator("input")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("input must not be blank")
        return value


class DecisionSchema(APIModel):
    step: int
    input: str
    response: str
    consequences: str
    next_options: list[str]
    score: int
    feedback: str | None = None
    created_at: datetime | None = None


class SessionCreatedSchema(APIModel):
    session_id: str
    scenario_id: int
    total_steps: int
    current_step: int
    status: str


class DecisionResultSchema(APIModel):
    step: int
    response: str
    consequences: str
    next_options: list[str]
    score: int
    feedback: str | None = None
    current_step: int
    total_steps: int
    status: str
    running_score: float | None = None


class CompletionSchema(APIModel):
    session_id: str
    final_score: int
    feedback: str
    status: str
    completed_at: datetime | None = None


class SessionSummarySchema(APIModel):
    id: str
    scenario_id: int
    status: str
    current_step: int
    total_steps: int
    running_score: float | None = None
    final_score: int | None = None
    started_at: datetime
    completed_at: datetime | None = None


class SessionOutSchema(SessionSummarySchema):
    owner_id: str
    feedback: str | None = None
    failure_reason: str | None = None
    decisions: list[DecisionSchema]
    progress_percent: float
    ready_to_complete: bool


class SessionListSchema(APIModel):
    sessions: list[SessionSummarySchema]
