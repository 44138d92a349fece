"""ScenarioSession model: one principal's attempt at one scenario."""
import enum

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from scenario_sim.db.session import Base


class SessionStatus(str, enum.Enum):
    INITIALIZED = "INITIALIZED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


TERMINAL_STATUSES = (SessionStatus.COMPLETED.value, SessionStatus.FAILED.value)
ACCEPTING_STATUSES = (SessionStatus.INITIALIZED.value, SessionStatus.IN_PROGRESS.value)


class ScenarioSession(Base):
    __tablename__ = "scenario_sessions"

    id = Column(String(36), primary_key=True)  # UUID4, server-assigned
    scenario_id = Column(Integer, ForeignKey("scenarios.id"), nullable=False, index=True)
    owner_id = Column(String(128), nullable=False, index=True)

    status = Column(String(16), nullable=False, default=SessionStatus.INITIALIZED.value)
    total_steps = Column(Integer, nullable=False)  # copied from the scenario at creation
    current_step = Column(Integer, nullable=False, default=1)  # 1-indexed; total_steps + 1 = ready to complete

    running_score = Column(Float, nullable=True)  # NULL until the first decision
    final_score = Column(Integer, nullable=True)  # set only at COMPLETED
    feedback = Column(Text, nullable=True)  # set only at COMPLETED
    failure_reason = Column(String(64), nullable=True)  # set only at FAILED

    started_at = Column(DateTime(timezone=True), nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    decisions = relationship(
        "Decision",
        back_populates="session",
        order_by="Decision.step",
        lazy="selectin",
    )

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def ready_to_complete(self) -> bool:
        return self.status == SessionStatus.IN_PROGRESS.value and self.current_step > self.total_steps
