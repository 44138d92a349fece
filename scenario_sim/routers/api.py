"""API routes: JSON for scenarios and scenario sessions."""
import logging
from functools import lru_cache
from typing import Annotated

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from scenario_sim.core.config import get_settings
from scenario_sim.core.exceptions import (
    EvaluatorUnavailable,
    InsufficientData,
    ScenarioEngineError,
    ScenarioNotFound,
    SessionIncomplete,
    SessionNotFound,
    StepMismatch,
)
from scenario_sim.core.security import verify_session_token
from scenario_sim.db.session import get_db
from scenario_sim.models.session import ScenarioSession
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
from scenario_sim.services.catalog import ScenarioCatalog
from scenario_sim.services.controller import SessionController
from scenario_sim.services.evaluator import EvaluatorAdapter, build_evaluator
from scenario_sim.services.feedback import CompletionService
from scenario_sim.services.scoring import progress_percent
from scenario_sim.services.store import SessionStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["sessions"])
settings = get_settings()

ERROR_STATUS = {
    ScenarioNotFound: 404,
    SessionNotFound: 404,
    StepMismatch: 409,  # includes SessionAlreadyTerminal
    SessionIncomplete: 409,
    EvaluatorUnavailable: 502,
    InsufficientData: 500,
}


# ---------- dependencies ----------

def get_current_owner(
    request: Request,
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    """Owner id from a bearer token or the auth cookie; 401 otherwise."""
    token = None
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization[7:].strip()
    if not token:
        token = request.cookies.get(settings.auth_cookie_name)
    owner_id = verify_session_token(token)
    if owner_id is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return owner_id


@lru_cache
def get_evaluator() -> EvaluatorAdapter:
    return build_evaluator(settings)


def get_catalog(db: Annotated[AsyncSession, Depends(get_db)]) -> ScenarioCatalog:
    return ScenarioCatalog(db)


def get_controller(
    db: Annotated[AsyncSession, Depends(get_db)],
    evaluator: Annotated[EvaluatorAdapter, Depends(get_evaluator)],
) -> SessionController:
    return SessionController(
        store=SessionStore(db),
        catalog=ScenarioCatalog(db),
        evaluator=evaluator,
        completion=CompletionService(evaluator),
    )


def _http_error(exc: ScenarioEngineError) -> HTTPException:
    status_code = 500
    for exc_type, code in ERROR_STATUS.items():
        if isinstance(exc, exc_type):
            status_code = code
            break
    if status_code == 500:
        logger.error("Invariant violation surfaced to API: %s", exc.message)
        return HTTPException(status_code=500, detail={"error": exc.code, "message": "Internal error"})
    return HTTPException(status_code=status_code, detail=exc.to_detail())


def _session_out(session: ScenarioSession) -> SessionOutSchema:
    return SessionOutSchema(
        id=session.id,
        scenario_id=session.scenario_id,
        owner_id=session.owner_id,
        status=session.status,
        current_step=session.current_step,
        total_steps=session.total_steps,
        running_score=session.running_score,
        final_score=session.final_score,
        feedback=session.feedback,
        failure_reason=session.failure_reason,
        started_at=session.started_at,
        completed_at=session.completed_at,
        decisions=[DecisionSchema.model_validate(d) for d in session.decisions],
        progress_percent=progress_percent(session.current_step, session.total_steps),
        ready_to_complete=session.ready_to_complete,
    )


# ---------- scenarios ----------

@router.get("/scenarios", response_model=ScenarioListSchema)
async def list_scenarios(
    catalog: Annotated[ScenarioCatalog, Depends(get_catalog)],
    category: str | None = None,
    difficulty: str | None = None,
    branch: str | None = None,
):
    """List active scenarios, optionally filtered."""
    scenarios = await catalog.list_scenarios(category=category, difficulty=difficulty, branch=branch)
    return ScenarioListSchema(scenarios=[ScenarioOutSchema.model_validate(s) for s in scenarios])


@router.get("/scenarios/{scenario_id}", response_model=ScenarioOutSchema)
async def get_scenario(
    scenario_id: int,
    catalog: Annotated[ScenarioCatalog, Depends(get_catalog)],
):
    """Get one scenario by ID."""
    scenario = await catalog.fetch_scenario(scenario_id)
    if scenario is None:
        raise _http_error(ScenarioNotFound(scenario_id))
    return ScenarioOutSchema.model_validate(scenario)


# ---------- sessions ----------

@router.post("/scenarios/{scenario_id}/sessions", response_model=SessionCreatedSchema, status_code=201)
async def create_session(
    scenario_id: int,
    owner_id: Annotated[str, Depends(get_current_owner)],
    controller: Annotated[SessionController, Depends(get_controller)],
):
    """Start a session on a scenario."""
    try:
        session = await controller.create_session(scenario_id, owner_id)
    except ScenarioEngineError as exc:
        raise _http_error(exc) from exc
    return SessionCreatedSchema(
        session_id=session.id,
        scenario_id=session.scenario_id,
        total_steps=session.total_steps,
        current_step=session.current_step,
        status=session.status,
    )


@router.get("/sessions", response_model=SessionListSchema)
async def list_sessions(
    owner_id: Annotated[str, Depends(get_current_owner)],
    controller: Annotated[SessionController, Depends(get_controller)],
):
    """The caller's sessions, newest first."""
    sessions = await controller.list_sessions(owner_id)
    return SessionListSchema(sessions=[SessionSummarySchema.model_validate(s) for s in sessions])


@router.get("/sessions/{session_id}", response_model=SessionOutSchema)
async def get_session(
    session_id: str,
    owner_id: Annotated[str, Depends(get_current_owner)],
    controller: Annotated[SessionController, Depends(get_controller)],
):
    """Authoritative session state; clients re-render from this after any conflict."""
    try:
        session = await controller.get_session(session_id, owner_id)
    except ScenarioEngineError as exc:
        raise _http_error(exc) from exc
    return _session_out(session)


@router.post("/sessions/{session_id}/decisions", response_model=DecisionResultSchema)
async def submit_decision(
    session_id: str,
    body: DecisionSubmitSchema,
    owner_id: Annotated[str, Depends(get_current_owner)],
    controller: Annotated[SessionController, Depends(get_controller)],
):
    """Answer the current step; 409 on a stale or duplicate step, 502 if the evaluator is down."""
    try:
        outcome = await controller.submit_decision(session_id, body.step, body.input, owner_id)
    except ScenarioEngineError as exc:
        raise _http_error(exc) from exc
    decision, session = outcome.decision, outcome.session
    return DecisionResultSchema(
        step=decision.step,
        response=decision.response,
        consequences=decision.consequences,
        next_options=decision.next_options,
        score=decision.score,
        feedback=decision.feedback,
        current_step=session.current_step,
        total_steps=session.total_steps,
        status=session.status,
        running_score=session.running_score,
    )


@router.post("/sessions/{session_id}/complete", response_model=CompletionSchema)
async def complete_session(
    session_id: str,
    owner_id: Annotated[str, Depends(get_current_owner)],
    controller: Annotated[SessionController, Depends(get_controller)],
):
    """Finalize a session once every step is answered. Safe to call again."""
    try:
        session = await controller.complete_session(session_id, owner_id)
    except ScenarioEngineError as exc:
        raise _http_error(exc) from exc
    return CompletionSchema(
        session_id=session.id,
        final_score=session.final_score,
        feedback=session.feedback,
        status=session.status,
        completed_at=session.completed_at,
    )
