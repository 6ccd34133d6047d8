"""SQLAlchemy repository for categories"""

import logging
from typing import List, Optional
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from sequence_timer.db.models.category import Category as CategoryORM
from sequence_timer.db.models.sequence import Sequence as SequenceORM
from sequence_timer.db.models.timer import Timer as TimerORM
from sequence_timer.models.category import (
    Category,
    CategoryCreate,
    CategoryUpdate,
    GENERAL_CATEGORY_ID,
)

logger = logging.getLogger(__name__)


class CategoryRepository:
    """Repository for category operations using SQLAlchemy"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_all(self) -> List[Category]:
        """All categories ordered by sort_order"""
        stmt = select(CategoryORM).order_by(CategoryORM.sort_order.asc(), CategoryORM.id.asc())
        result = await self.db.execute(stmt)
        return [Category.model_validate(row) for row in result.scalars().all()]

    async def get_by_id(self, category_id: int) -> Optional[Category]:
        row = await self.db.get(CategoryORM, category_id)
        return Category.model_validate(row) if row else None

    async def create(self, data: CategoryCreate) -> Category:
        max_order = await self.db.scalar(select(func.max(CategoryORM.sort_order)))
        row = CategoryORM(**data.model_dump(), sort_order=(max_order or 0) + 1, is_default=False)
        self.db.add(row)
        await self.db.commit()
        await self.db.refresh(row)
        logger.info(f"Category created: {row.id} '{row.name}'")
        return Category.model_validate(row)

    async def update(self, category_id: int, data: CategoryUpdate) -> Optional[Category]:
        row = await self.db.get(CategoryORM, category_id)
        if row is None:
            return None

        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(row, key, value)
        await self.db.commit()
        await self.db.refresh(row)
        return Category.model_validate(row)

    async def reorder(self, ordered_ids: List[int]) -> List[Category]:
        """
        Set sort_order from the position of each ID in the list.

        Unknown IDs are skipped; categories not listed keep their order.
        """
        for index, category_id in enumerate(ordered_ids):
            await self.db.execute(
                update(CategoryORM)
                .where(CategoryORM.id == category_id)
                .values(sort_order=index)
            )
        await self.db.commit()
        logger.info(f"Categories reordered: {ordered_ids}")
        return await self.get_all()

    async def delete(self, category_id: int) -> bool:
        """
        Delete a category, moving its timers and sequences to General.

        Raises:
            ValueError: If the category is a default category
        """
        row = await self.db.get(CategoryORM, category_id)
        if row is None:
            return False
        if row.is_default:
            raise ValueError(f"Category {category_id} is a default category and cannot be deleted")

        await self.db.execute(
            update(TimerORM)
            .where(TimerORM.category_id == category_id)
            .values(category_id=GENERAL_CATEGORY_ID)
        )
        await self.db.execute(
            update(SequenceORM)
            .where(SequenceORM.category_id == category_id)
            .values(category_id=GENERAL_CATEGORY_ID)
        )
        await self.db.delete(row)
        await self.db.commit()
        logger.info(f"Category {category_id} deleted, items moved to General")
        return True
