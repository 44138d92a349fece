"""Session store: keyed persistence with step/status-guarded updates.

Every mutating method is a conditional write: it applies only if the stored
current_step and status still match what the caller read, and reports
whether it did. No business rules live here.
"""
import json
import logging
from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from scenario_sim.models.decision import Decision
from scenario_sim.models.session import ScenarioSession, SessionStatus

logger = logging.getLogger(__name__)


class SessionStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, session: ScenarioSession) -> ScenarioSession:
        self.db.add(session)
        await self.db.commit()
        return await self.get(session.id)

    async def get(self, session_id: str) -> ScenarioSession | None:
        # populate_existing: guarded updates bypass the identity map
        result = await self.db.execute(
            select(ScenarioSession)
            .where(ScenarioSession.id == session_id)
            .execution_options(populate_existing=True)
        )
        session = result.scalar_one_or_none()
        # release the read transaction before any long evaluator call
        await self.db.commit()
        return session

    async def list_for_owner(self, owner_id: str) -> Sequence[ScenarioSession]:
        result = await self.db.execute(
            select(ScenarioSession)
            .where(ScenarioSession.owner_id == owner_id)
            .order_by(ScenarioSession.started_at.desc())
        )
        sessions = result.scalars().all()
        await self.db.commit()
        return sessions

    async def append_decision(
        self,
        session_id: str,
        expected_step: int,
        expected_status: str,
        *,
        user_input: str,
        response: str,
        consequences: str,
        next_options: Sequence[str],
        score: int,
        feedback: str | None,
        running_score: float,
    ) -> bool:
        """Record the decision, bump current_step and store the running score in one transaction."""
        result = await self.db.execute(
            update(ScenarioSession)
            .where(
                ScenarioSession.id == session_id,
                ScenarioSession.current_step == expected_step,
                ScenarioSession.status == expected_status,
            )
            .values(
                current_step=expected_step + 1,
                status=SessionStatus.IN_PROGRESS.value,
                running_score=running_score,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            await self.db.rollback()
            return False
        self.db.add(
            Decision(
                session_id=session_id,
                step=expected_step,
                input=user_input,
                response=response,
                consequences=consequences,
                next_options_json=json.dumps(list(next_options)),
                score=score,
                feedback=feedback,
            )
        )
        try:
            await self.db.commit()
        except IntegrityError:
            # (session_id, step) already recorded by a concurrent writer
            await self.db.rollback()
            logger.warning("Duplicate decision for session %s step %d rejected", session_id, expected_step)
            return False
        return True

    async def mark_failed(self, session_id: str, expected_step: int, expected_status: str, reason: str) -> bool:
        result = await self.db.execute(
            update(ScenarioSession)
            .where(
                ScenarioSession.id == session_id,
                ScenarioSession.current_step == expected_step,
                ScenarioSession.status == expected_status,
            )
            .values(status=SessionStatus.FAILED.value, failure_reason=reason)
            .execution_options(synchronize_session=False)
        )
        applied = result.rowcount == 1
        await self.db.commit()
        return applied

    async def mark_completed(
        self,
        session_id: str,
        expected_step: int,
        *,
        final_score: int,
        feedback: str,
        completed_at: datetime,
    ) -> bool:
        result = await self.db.execute(
            update(ScenarioSession)
            .where(
                ScenarioSession.id == session_id,
                ScenarioSession.current_step == expected_step,
                ScenarioSession.status == SessionStatus.IN_PROGRESS.value,
            )
            .values(
                status=SessionStatus.COMPLETED.value,
                final_score=final_score,
                feedback=feedback,
                completed_at=completed_at,
            )
            .execution_options(synchronize_session=False)
        )
        applied = result.rowcount == 1
        await self.db.commit()
        return applied
