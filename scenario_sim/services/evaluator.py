"""Decision evaluator boundary.

EvaluatorAdapter bounds every backend call with a timeout and retries
transient failures a fixed number of times; anything else surfaces as
EvaluatorUnavailable straight away. OpenAIEvaluatorBackend is the production
backend; tests plug in deterministic fakes.
"""
from __future__ import annotations

import abc
import asyncio
import json
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

import openai
from openai import AsyncOpenAI
from pydantic import ValidationError

from scenario_sim.core.config import Settings, get_settings
from scenario_sim.core.exceptions import EvaluatorUnavailable
from scenario_sim.schemas.evaluation import EvaluationRequest, FeedbackRequest, HistoryEntry, Verdict

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TransientEvaluatorError(Exception):
    """Network-level failure worth retrying (connection reset, 5xx, rate limit)."""


class EvaluatorResponseError(Exception):
    """Backend answered but the answer is unusable, or the call can never succeed."""


class EvaluatorBackend(abc.ABC):
    """Narrow interface to whatever scores decisions."""

    @abc.abstractmethod
    async def evaluate_decision(self, request: EvaluationRequest) -> Verdict:
        ...

    @abc.abstractmethod
    async def write_feedback(self, request: FeedbackRequest) -> str:
        ...


class EvaluatorAdapter:
    def __init__(self, backend: EvaluatorBackend, timeout: float = 15.0, max_retries: int = 1):
        self.backend = backend
        self.timeout = timeout
        self.max_retries = max(0, max_retries)

    async def evaluate(
        self,
        scenario_text: str,
        history: Sequence[HistoryEntry],
        user_input: str,
        step: int,
    ) -> Verdict:
        request = EvaluationRequest(scenario_text=scenario_text, history=list(history), input=user_input, step=step)
        return await self._call("evaluate_decision", lambda: self.backend.evaluate_decision(request))

    async def summarize(self, scenario_text: str, history: Sequence[HistoryEntry], final_score: int) -> str:
        request = FeedbackRequest(scenario_text=scenario_text, history=list(history), final_score=final_score)
        return await self._call("write_feedback", lambda: self.backend.write_feedback(request))

    async def _call(self, operation: str, factory: Callable[[], Awaitable[T]]) -> T:
        attempts = self.max_retries + 1
        last_error: Exception | None = None
        for attempt in range(1, attempts + 1):
            try:
                return await asyncio.wait_for(factory(), timeout=self.timeout)
            except (asyncio.TimeoutError, TransientEvaluatorError) as exc:
                last_error = exc
                logger.warning(
                    "Evaluator %s failed transiently (attempt %d/%d): %s",
                    operation,
                    attempt,
                    attempts,
                    str(exc) or type(exc).__name__,
                )
            except EvaluatorResponseError as exc:
                logger.error("Evaluator %s returned an unusable result: %s", operation, exc)
                raise EvaluatorUnavailable(f"Evaluator returned an unusable result: {exc}") from exc
        logger.error("Evaluator %s unavailable after %d attempts", operation, attempts)
        raise EvaluatorUnavailable(f"Evaluator unavailable after {attempts} attempts") from last_error


# ---------- OpenAI backend ----------

EVALUATOR_SYSTEM_PROMPT = (
    "You are a military legal expert evaluating decisions in legal training scenarios. "
    "Provide realistic consequences and educational feedback."
)

FEEDBACK_SYSTEM_PROMPT = (
    "You are a military legal instructor providing comprehensive feedback on legal scenario performance."
)

# Errors that may succeed on a second try
TRANSIENT_OPENAI_ERRORS = (
    openai.APIConnectionError,  # includes APITimeoutError
    openai.RateLimitError,
    openai.InternalServerError,
)


def _format_history(history: Sequence[HistoryEntry]) -> str:
    if not history:
        return "None yet."
    return "\n".join(f"Step {h.step}: {h.input} (scored {h.score}/100)" for h in history)


def build_decision_prompt(request: EvaluationRequest) -> str:
    return f"""You are simulating the consequences of a decision in a military legal scenario.

Original Scenario: {request.scenario_text}
Previous Decisions:
{_format_history(request.history)}
Current Step: {request.step}
User's Decision: {request.input}

Analyze the user's decision and provide:
1. Immediate response/reaction to their choice
2. Legal and practical consequences
3. 3-4 realistic next options for the user
4. A score (0-100) based on legal accuracy and wisdom of the choice
5. Brief feedback on the decision quality

Respond in JSON format:
{{
  "response": "What happens immediately after this decision",
  "consequences": "Short and long-term legal/professional consequences",
  "nextOptions": ["Option 1", "Option 2", "Option 3", "Option 4"],
  "score": 85,
  "feedback": "Brief assessment of decision quality"
}}

Be realistic about military procedures, UCMJ requirements, and chain of command protocols."""


def build_feedback_prompt(request: FeedbackRequest) -> str:
    decisions = " -> ".join(h.input for h in request.history) or "None"
    return f"""Provide comprehensive feedback for a completed military legal scenario simulation.

Scenario: {request.scenario_text}
User's Decisions: {decisions}
Final Score: {request.final_score}/100

Generate detailed feedback that includes:
1. Overall performance assessment
2. Strengths in decision-making
3. Areas for improvement
4. Key legal concepts learned
5. Real-world applications
6. Recommendations for further study

Keep the feedback constructive and educational."""


class OpenAIEvaluatorBackend(EvaluatorBackend):
    """Scores decisions with an OpenAI chat model in JSON mode."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        api_base: str | None = None,
        client: AsyncOpenAI | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self.api_base = api_base
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self.api_key:
                raise EvaluatorResponseError("OPENAI_API_KEY not set")
            # retries are owned by EvaluatorAdapter
            self._client = AsyncOpenAI(api_key=self.api_key, base_url=self.api_base, max_retries=0)
        return self._client

    async def _complete(self, system: str, prompt: str, **kwargs) -> str:
        client = self._get_client()
        try:
            completion = await client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": prompt},
                ],
                **kwargs,
            )
        except TRANSIENT_OPENAI_ERRORS as exc:
            raise TransientEvaluatorError(str(exc)) from exc
        except openai.OpenAIError as exc:
            raise EvaluatorResponseError(str(exc)) from exc
        return completion.choices[0].message.content or ""

    async def evaluate_decision(self, request: EvaluationRequest) -> Verdict:
        content = await self._complete(
            EVALUATOR_SYSTEM_PROMPT,
            build_decision_prompt(request),
            response_format={"type": "json_object"},
            max_tokens=800,
            temperature=0.6,
        )
        return parse_verdict(content)

    async def write_feedback(self, request: FeedbackRequest) -> str:
        content = await self._complete(
            FEEDBACK_SYSTEM_PROMPT,
            build_feedback_prompt(request),
            max_tokens=600,
            temperature=0.7,
        )
        content = content.strip()
        if not content:
            raise EvaluatorResponseError("Empty feedback")
        return content


def parse_verdict(content: str) -> Verdict:
    """Parse and validate the evaluator's JSON answer."""
    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise EvaluatorResponseError(f"Invalid JSON from evaluator: {exc}") from exc
    if not isinstance(data, dict):
        raise EvaluatorResponseError("Evaluator JSON is not an object")
    try:
        return Verdict.model_validate(data)
    except ValidationError as exc:
        raise EvaluatorResponseError(f"Invalid verdict: {exc.error_count()} validation error(s)") from exc


def build_evaluator(settings: Settings | None = None) -> EvaluatorAdapter:
    settings = settings or get_settings()
    backend = OpenAIEvaluatorBackend(
        api_key=settings.openai_api_key,
        model=settings.evaluator_model,
        api_base=settings.openai_api_base,
    )
    return EvaluatorAdapter(
        backend,
        timeout=settings.evaluator_timeout_seconds,
        max_retries=settings.evaluator_max_retries,
    )
