"""Points and badge tiers."""
from __future__ import annotations

import logging

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from civicpulse.models.user import User

logger = logging.getLogger(__name__)

REGISTRATION_POINTS = 10
REPORT_POINTS = 10

# Inclusive lower bounds, highest first.
BADGE_TIERS: tuple[tuple[int, str], ...] = (
    (2500, "Champion"),
    (1000, "Guardian"),
    (500, "Civic Hero"),
)
DEFAULT_BADGE = "Rising Star"


def badge_for_points(points: int) -> str:
    for threshold, badge in BADGE_TIERS:
        if points >= threshold:
            return badge
    return DEFAULT_BADGE


async def award_points(session: AsyncSession, user_id: int, amount: int) -> None:
    """Add ``amount`` points to a user with a single UPDATE."""
    if amount < 0:
        raise ValueError("Points can only be awarded, not deducted")
    await session.execute(update(User).where(User.id == user_id).values(points=User.points + amount))
    logger.info("Awarded %d points to user %s", amount, user_id)
