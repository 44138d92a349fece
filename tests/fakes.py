"""Deterministic evaluator backends for tests."""
import asyncio

from scenario_sim.schemas.evaluation import EvaluationRequest, FeedbackRequest, Verdict
from scenario_sim.services.evaluator import EvaluatorBackend


class ScriptedBackend(EvaluatorBackend):
    """Returns queued scores; raises queued exceptions first."""

    def __init__(self, scores=None, failures=None, feedback="Solid grasp of UCMJ procedure.", feedback_failures=None):
        self.scores = list(scores or [])
        self.failures = list(failures or [])
        self.feedback = feedback
        self.feedback_failures = list(feedback_failures or [])
        self.evaluate_calls: list[EvaluationRequest] = []
        self.feedback_calls: list[FeedbackRequest] = []

    async def evaluate_decision(self, request: EvaluationRequest) -> Verdict:
        self.evaluate_calls.append(request)
        if self.failures:
            raise self.failures.pop(0)
        score = self.scores.pop(0) if self.scores else 75
        return Verdict(
            response=f"The command reacts to: {request.input}",
            consequences=f"Consequences of step {request.step}",
            next_options=["Consult defense counsel", "Request a hearing"],
            score=score,
            feedback="Reasonable choice.",
        )

    async def write_feedback(self, request: FeedbackRequest) -> str:
        self.feedback_calls.append(request)
        if self.feedback_failures:
            raise self.feedback_failures.pop(0)
        return self.feedback


class GatedBackend(ScriptedBackend):
    """Blocks every evaluation (or every feedback call) until release() so callers can line up concurrent requests."""

    def __init__(self, gate_feedback=False, **kwargs):
        super().__init__(**kwargs)
        self.gate_feedback = gate_feedback
        self.gate = asyncio.Event()
        self.entered = 0

    def release(self) -> None:
        self.gate.set()

    async def wait_for_entries(self, count: int) -> None:
        while self.entered < count:
            await asyncio.sleep(0.01)

    async def _pass_gate(self) -> None:
        self.entered += 1
        await self.gate.wait()

    async def evaluate_decision(self, request: EvaluationRequest) -> Verdict:
        if not self.gate_feedback:
            await self._pass_gate()
        return await super().evaluate_decision(request)

    async def write_feedback(self, request: FeedbackRequest) -> str:
        if self.gate_feedback:
            await self._pass_gate()
        return await super().write_feedback(request)


class SlowBackend(ScriptedBackend):
    """Sleeps longer than any test timeout on the first `slow_calls` evaluations."""

    def __init__(self, slow_calls=1, delay=5.0, **kwargs):
        super().__init__(**kwargs)
        self.slow_calls = slow_calls
        self.delay = delay

    async def evaluate_decision(self, request: EvaluationRequest) -> Verdict:
        if self.slow_calls > 0:
            self.slow_calls -= 1
            self.evaluate_calls.append(request)
            await asyncio.sleep(self.delay)
        return await super().evaluate_decision(request)
