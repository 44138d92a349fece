"""Decision model: one answered step of a session, with the evaluator's verdict."""
import json

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from scenario_sim.db.session import Base


class Decision(Base):
    __tablename__ = "decisions"
    __table_args__ = (UniqueConstraint("session_id", "step", name="uq_decisions_session_step"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    session_id = Column(String(36), ForeignKey("scenario_sessions.id"), nullable=False, index=True)
    step = Column(Integer, nullable=False)  # equals the session's current_step at submission

    input = Column(Text, nullable=False)  # free text or the selected option
    response = Column(Text, nullable=False)
    consequences = Column(Text, nullable=False)
    # next options: JSON array of strings; empty means the next step needs free text
    next_options_json = Column(Text, nullable=False, default="[]")
    score = Column(Integer, nullable=False)  # 0-100
    feedback = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)

    session = relationship("ScenarioSession", back_populates="decisions")

    @property
    def next_options(self) -> list[str]:
        return json.loads(self.next_options_json or "[]")
