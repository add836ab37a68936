"""Category catalog lookups and seeding."""
from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from civicpulse.models.category import Category

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = (
    "Road Damage",
    "Sanitation",
    "Streetlights",
    "Water Supply",
    "Parks",
    "Traffic",
    "Public Safety",
    "Other",
)


async def list_categories(session: AsyncSession) -> list[Category]:
    result = await session.execute(select(Category).order_by(Category.name))
    return list(result.scalars().all())


async def get_category(session: AsyncSession, category_id: int) -> Category | None:
    return await session.get(Category, category_id)


async def find_category_id(session: AsyncSession, name: str) -> int | None:
    result = await session.execute(select(Category.id).where(Category.name == name))
    return result.scalar_one_or_none()


async def seed_categories(session: AsyncSession, names: tuple[str, ...] = DEFAULT_CATEGORIES) -> int:
    """Insert any missing catalog entries and return how many were added."""
    result = await session.execute(select(Category.name))
    existing = set(result.scalars().all())
    missing = [name for name in names if name not in existing]
    session.add_all(Category(name=name) for name in missing)
    await session.flush()
    if missing:
        logger.info("Seeded %d categories", len(missing))
    return len(missing)
