"""Seed data inserted on startup"""

import logging
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sequence_timer.db.models.category import Category as CategoryORM
from sequence_timer.models.category import DEFAULT_CATEGORIES

logger = logging.getLogger(__name__)


async def seed_default_categories(db: AsyncSession) -> int:
    """
    Insert the default categories that are missing.

    Returns:
        Number of categories inserted
    """
    result = await db.execute(select(CategoryORM.id))
    existing = {row[0] for row in result.all()}

    inserted = 0
    for category in DEFAULT_CATEGORIES:
        if category.id in existing:
            continue
        db.add(CategoryORM(**category.model_dump()))
        inserted += 1

    if inserted:
        await db.commit()
        logger.info(f"Seeded {inserted} default categories")
    return inserted
