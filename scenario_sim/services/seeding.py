"""Seed the catalog with the default legal-training scenarios when it is empty."""
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from scenario_sim.core.config import get_settings
from scenario_sim.models.scenario import Scenario

logger = logging.getLogger(__name__)

DEFAULT_SCENARIOS = [
    {
        "title": "Article 15 at the Motor Pool",
        "description": "A soldier is offered non-judicial punishment after a vehicle accident on post.",
        "narrative_text": (
            "You are a specialist assigned to a transportation company. During a late-night recovery "
            "mission you backed a tactical vehicle into a fuel point, causing damage. Two days later your "
            "commander notifies you that she intends to impose non-judicial punishment under Article 15, "
            "UCMJ, for dereliction of duty. You have been told you may consult with defense counsel and "
            "that you may demand trial by court-martial instead. What do you do first?"
        ),
        "estimated_minutes": 15,
        "category": "Administrative Actions",
        "difficulty": "beginner",
        "branch": "Army",
    },
    {
        "title": "Security Clearance Statement of Reasons",
        "description": "A petty officer receives a Statement of Reasons threatening their clearance.",
        "narrative_text": (
            "You are a petty officer first class holding a Top Secret clearance. The DoD Consolidated "
            "Adjudications Facility has issued a Statement of Reasons citing unreported foreign contacts "
            "and a delinquent credit card account. You have a limited window to respond in writing, and "
            "your command security manager has offered to help. How do you begin your response?"
        ),
        "estimated_minutes": 20,
        "category": "Security Clearances",
        "difficulty": "intermediate",
        "branch": "Navy",
    },
    {
        "title": "Preferral of Charges",
        "description": "An NCO learns that charges are about to be preferred after an off-duty incident.",
        "narrative_text": (
            "You are a staff sergeant. After an off-base altercation, military police questioned you and "
            "your first sergeant now tells you charges alleging assault consummated by a battery under "
            "Article 128 are being prepared. Investigators want a follow-up interview tomorrow morning. "
            "What is your first decision?"
        ),
        "estimated_minutes": 25,
        "category": "Court-Martial Defense",
        "difficulty": "advanced",
        "branch": "All",
    },
]


async def seed_scenarios(db: AsyncSession, total_steps: int | None = None) -> int:
    """Insert DEFAULT_SCENARIOS if the catalog is empty. Returns the number inserted.

    Each seeded scenario gets `total_steps` decisions, defaulting to the configured step count.
    """
    result = await db.execute(select(func.count(Scenario.id)))
    if result.scalar_one() > 0:
        return 0
    if total_steps is None:
        total_steps = get_settings().default_total_steps
    db.add_all(Scenario(total_steps=total_steps, **data) for data in DEFAULT_SCENARIOS)
    await db.commit()
    logger.info("Seeded %d scenarios with %d steps each", len(DEFAULT_SCENARIOS), total_steps)
    return len(DEFAULT_SCENARIOS)
