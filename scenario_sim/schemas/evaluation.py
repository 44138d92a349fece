"""Pydantic schemas for the evaluator boundary (outbound request, inbound verdict)."""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Verdict(BaseModel):
    """Evaluator's scored response to one decision."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    response: str = Field(min_length=1)
    consequences: str
    next_options: list[str] = Field(default_factory=list)
    score: int = Field(ge=0, le=100)
    feedback: str | None = None

    @field_validator("next_options")
    @classmethod
    def _drop_blank_options(cls, value: list[str]) -> list[str]:
        return [option.strip() for option in value if option and option.strip()]


class HistoryEntry(BaseModel):
    """One prior decision as the evaluator sees it."""

    step: int
    input: str
    response: str
    consequences: str
    score: int


class EvaluationRequest(BaseModel):
    scenario_text: str
    history: list[HistoryEntry]
    input: str
    step: int


class FeedbackRequest(BaseModel):
    scenario_text: str
    history: list[HistoryEntry]
    final_score: int
