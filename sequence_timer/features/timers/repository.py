"""SQLAlchemy repository for timer definitions"""

import logging
from typing import List, Optional
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from sequence_timer.db.models.timer import Timer as TimerORM
from sequence_timer.models.timer import Timer, TimerCreate, TimerUpdate

logger = logging.getLogger(__name__)


class TimerRepository:
    """Repository for timer operations using SQLAlchemy"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_all(self, category_id: Optional[int] = None) -> List[Timer]:
        """
        Get timers ordered by sort_order, then creation time.

        Args:
            category_id: Only return timers of this category when given
        """
        stmt = select(TimerORM)
        if category_id is not None:
            stmt = stmt.where(TimerORM.category_id == category_id)
        stmt = stmt.order_by(TimerORM.sort_order.asc(), TimerORM.created_at.asc(), TimerORM.id.asc())

        result = await self.db.execute(stmt)
        return [Timer.model_validate(row) for row in result.scalars().all()]

    async def get_by_id(self, timer_id: int) -> Optional[Timer]:
        row = await self.db.get(TimerORM, timer_id)
        return Timer.model_validate(row) if row else None

    async def count(self) -> int:
        return await self.db.scalar(select(func.count()).select_from(TimerORM)) or 0

    async def create(self, data: TimerCreate) -> Timer:
        """Create a timer at the end of the list"""
        max_order = await self.db.scalar(select(func.max(TimerORM.sort_order)))
        row = TimerORM(
            **data.model_dump(mode="json"),
            sort_order=(max_order or 0) + 1,
        )
        self.db.add(row)
        await self.db.commit()
        await self.db.refresh(row)
        logger.info(f"Timer created: {row.id} '{row.label}' ({row.duration_seconds}sec)")
        return Timer.model_validate(row)

    async def update(self, timer_id: int, data: TimerUpdate) -> Optional[Timer]:
        row = await self.db.get(TimerORM, timer_id)
        if row is None:
            return None

        for key, value in data.model_dump(exclude_unset=True, mode="json").items():
            setattr(row, key, value)
        await self.db.commit()
        await self.db.refresh(row)
        return Timer.model_validate(row)

    async def delete(self, timer_id: int) -> bool:
        row = await self.db.get(TimerORM, timer_id)
        if row is None:
            return False
        await self.db.delete(row)
        await self.db.commit()
        logger.info(f"Timer {timer_id} deleted")
        return True
