"""Session controller: the scenario session state machine.

INITIALIZED -> IN_PROGRESS -> COMPLETED | FAILED

Reads the session, does the slow work (evaluator, feedback) without holding
anything, then commits through a guarded store write. A write that loses a
race is reported as StepMismatch; nothing is retried here.
"""
import logging
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone

from scenario_sim.core.exceptions import (
    EvaluatorUnavailable,
    InsufficientData,
    ScenarioNotFound,
    SessionAlreadyTerminal,
    SessionIncomplete,
    SessionNotFound,
    StepMismatch,
)
from scenario_sim.models.decision import Decision
from scenario_sim.models.session import ScenarioSession, SessionStatus
from scenario_sim.schemas.evaluation import HistoryEntry
from scenario_sim.services.catalog import ScenarioCatalog
from scenario_sim.services.evaluator import EvaluatorAdapter
from scenario_sim.services.feedback import CompletionService
from scenario_sim.services.scoring import final_score, running_score
from scenario_sim.services.store import SessionStore

logger = logging.getLogger(__name__)

FAILURE_EVALUATOR = "evaluator_unavailable"
FAILURE_SCENARIO = "scenario_unavailable"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def history_of(decisions: Sequence[Decision]) -> list[HistoryEntry]:
    return [
        HistoryEntry(step=d.step, input=d.input, response=d.response, consequences=d.consequences, score=d.score)
        for d in decisions
    ]


@dataclass
class DecisionOutcome:
    session: ScenarioSession
    decision: Decision


class SessionController:
    def __init__(
        self,
        store: SessionStore,
        catalog: ScenarioCatalog,
        evaluator: EvaluatorAdapter,
        completion: CompletionService | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.catalog = catalog
        self.evaluator = evaluator
        self.completion = completion or CompletionService(evaluator)
        self.clock = clock

    # ---------- reads ----------

    async def get_session(self, session_id: str, owner_id: str | None = None) -> ScenarioSession:
        session = await self.store.get(session_id)
        if session is None or (owner_id is not None and session.owner_id != owner_id):
            raise SessionNotFound(session_id)
        return session

    async def list_sessions(self, owner_id: str) -> Sequence[ScenarioSession]:
        return await self.store.list_for_owner(owner_id)

    # ---------- mutations ----------

    async def create_session(self, scenario_id: int, owner_id: str) -> ScenarioSession:
        scenario = await self.catalog.fetch_scenario(scenario_id)
        if scenario is None:
            raise ScenarioNotFound(scenario_id)
        session = await self.store.create(
            ScenarioSession(
                id=str(uuid.uuid4()),
                scenario_id=scenario.id,
                owner_id=owner_id,
                status=SessionStatus.INITIALIZED.value,
                total_steps=scenario.total_steps,
                current_step=1,
                started_at=self.clock(),
            )
        )
        logger.info(
            "Session %s created for owner %s on scenario %d (%d steps)",
            session.id,
            owner_id,
            scenario_id,
            session.total_steps,
        )
        return session

    async def submit_decision(
        self,
        session_id: str,
        step: int,
        user_input: str,
        owner_id: str | None = None,
    ) -> DecisionOutcome:
        session = await self.get_session(session_id, owner_id)
        status = session.status
        current_step = session.current_step

        if session.is_terminal:
            logger.warning("Decision for step %d on terminal session %s (%s) rejected", step, session_id, status)
            raise SessionAlreadyTerminal(current_step, status, step)
        if step != current_step or current_step > session.total_steps:
            logger.warning(
                "Step mismatch on session %s: submitted %d, current %d of %d",
                session_id,
                step,
                current_step,
                session.total_steps,
            )
            raise StepMismatch(current_step, status, step)

        scenario = await self.catalog.fetch_scenario(session.scenario_id)
        if scenario is None:
            await self.store.mark_failed(session_id, current_step, status, FAILURE_SCENARIO)
            logger.error("Scenario %d vanished under session %s; session failed", session.scenario_id, session_id)
            raise ScenarioNotFound(session.scenario_id)

        history = history_of(session.decisions)
        user_input = user_input.strip()
        try:
            verdict = await self.evaluator.evaluate(scenario.narrative_text, history, user_input, step)
        except EvaluatorUnavailable:
            if current_step == 1:
                if await self.store.mark_failed(session_id, current_step, status, FAILURE_EVALUATOR):
                    logger.error("Session %s failed: evaluator unavailable on the first decision", session_id)
            else:
                logger.warning("Evaluator unavailable on session %s step %d; step left open", session_id, step)
            raise

        scores = [h.score for h in history] + [verdict.score]
        applied = await self.store.append_decision(
            session_id,
            current_step,
            status,
            user_input=user_input,
            response=verdict.response,
            consequences=verdict.consequences,
            next_options=verdict.next_options,
            score=verdict.score,
            feedback=verdict.feedback,
            running_score=running_score(scores),
        )
        fresh = await self.store.get(session_id)
        if not applied:
            logger.warning("Concurrent write won on session %s step %d; decision discarded", session_id, step)
            if fresh.is_terminal:
                raise SessionAlreadyTerminal(fresh.current_step, fresh.status, step)
            raise StepMismatch(fresh.current_step, fresh.status, step)

        decision = next(d for d in fresh.decisions if d.step == step)
        logger.info(
            "Session %s step %d/%d recorded (score %d, running %.1f)",
            session_id,
            step,
            fresh.total_steps,
            decision.score,
            fresh.running_score,
        )
        return DecisionOutcome(session=fresh, decision=decision)

    async def complete_session(self, session_id: str, owner_id: str | None = None) -> ScenarioSession:
        session = await self.get_session(session_id, owner_id)
        if session.status == SessionStatus.COMPLETED.value:
            return session
        if session.status == SessionStatus.FAILED.value:
            raise SessionAlreadyTerminal(session.current_step, session.status)
        if session.current_step <= session.total_steps or session.status != SessionStatus.IN_PROGRESS.value:
            raise SessionIncomplete(session.current_step, session.total_steps)

        current_step = session.current_step
        history = history_of(session.decisions)
        try:
            score = final_score([h.score for h in history])
        except InsufficientData:
            logger.exception("Session %s is ready to complete but has no decisions", session_id)
            raise

        scenario = await self.catalog.fetch_scenario(session.scenario_id)
        feedback = await self.completion.feedback_for(
            scenario.narrative_text if scenario else None,
            history,
            score,
        )

        applied = await self.store.mark_completed(
            session_id,
            current_step,
            final_score=score,
            feedback=feedback,
            completed_at=self.clock(),
        )
        fresh = await self.store.get(session_id)
        if not applied:
            if fresh.status == SessionStatus.COMPLETED.value:
                # concurrent completion won; its result is authoritative
                return fresh
            raise SessionAlreadyTerminal(fresh.current_step, fresh.status)
        logger.info("Session %s completed with final score %d", session_id, score)
        return fresh
