"""Pydantic schemas for catalog scenarios."""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class APIModel(BaseModel):
    """Base for JSON payloads: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class ScenarioOutSchema(APIModel):
    id: int
    title: str
    description: str
    narrative_text: str
    total_steps: int
    estimated_minutes: int
    category: str
    difficulty: str
    branch: str


class ScenarioListSchema(APIModel):
    scenarios: list[ScenarioOutSchema]
