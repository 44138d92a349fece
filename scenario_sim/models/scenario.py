"""Scenario model: one legal-training scenario in the catalog."""
from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from scenario_sim.core.config import get_settings
from scenario_sim.db.session import Base


class Scenario(Base):
    __tablename__ = "scenarios"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    narrative_text = Column(Text, nullable=False)
    total_steps = Column(Integer, nullable=False, default=lambda: get_settings().default_total_steps)
    estimated_minutes = Column(Integer, nullable=False, default=15)
    category = Column(String(64), nullable=False, index=True)
    difficulty = Column(String(32), nullable=False, index=True)  # beginner | intermediate | advanced
    branch = Column(String(32), nullable=False, default="All")  # "All" matches every branch filter
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)
