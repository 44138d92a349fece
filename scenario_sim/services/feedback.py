"""Completion feedback: evaluator narrative, or a deterministic summary when it is unavailable."""
import logging
from collections.abc import Sequence

from scenario_sim.core.exceptions import EvaluatorUnavailable
from scenario_sim.schemas.evaluation import HistoryEntry
from scenario_sim.services.evaluator import EvaluatorAdapter

logger = logging.getLogger(__name__)


def fallback_feedback(decision_count: int, final_score: int) -> str:
    noun = "decision" if decision_count == 1 else "decisions"
    return f"You completed {decision_count} {noun} with a final score of {final_score}%."


class CompletionService:
    def __init__(self, evaluator: EvaluatorAdapter):
        self.evaluator = evaluator

    async def feedback_for(
        self,
        scenario_text: str | None,
        history: Sequence[HistoryEntry],
        final_score: int,
    ) -> str:
        """Never raises for evaluator trouble: completion must not depend on it."""
        if scenario_text is None:
            return fallback_feedback(len(history), final_score)
        try:
            return await self.evaluator.summarize(scenario_text, history, final_score)
        except EvaluatorUnavailable:
            logger.warning("Evaluator unavailable for completion feedback; using templated summary")
            return fallback_feedback(len(history), final_score)
