"""SQLAlchemy repository for sequences and their steps"""

import logging
from typing import List, Optional
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from sequence_timer.db.models.sequence import Sequence as SequenceORM
from sequence_timer.db.models.sequence import SequenceStep as SequenceStepORM
from sequence_timer.models.sequence import (
    SequenceCreate,
    SequenceStepCreate,
    SequenceUpdate,
    SequenceWithSteps,
)

logger = logging.getLogger(__name__)


def _step_rows(steps: List[SequenceStepCreate]) -> List[SequenceStepORM]:
    """
    Build step rows ordered by step_order, list position breaking ties.

    Orders are renumbered 0..n-1 so stored steps never share an order.
    """
    ordered = sorted(enumerate(steps), key=lambda item: (item[1].step_order, item[0]))
    return [
        SequenceStepORM(
            label=step.label,
            duration_seconds=step.duration_seconds,
            notification_kind=step.notification_kind.value,
            step_order=position,
        )
        for position, (_, step) in enumerate(ordered)
    ]


class SequenceRepository:
    """Repository for sequence operations using SQLAlchemy"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_all(self, category_id: Optional[int] = None) -> List[SequenceWithSteps]:
        """Get sequences with steps, ordered by sort_order then creation time"""
        stmt = select(SequenceORM).options(selectinload(SequenceORM.steps))
        if category_id is not None:
            stmt = stmt.where(SequenceORM.category_id == category_id)
        stmt = stmt.order_by(SequenceORM.sort_order.asc(), SequenceORM.created_at.asc(), SequenceORM.id.asc())

        result = await self.db.execute(stmt)
        return [SequenceWithSteps.model_validate(row) for row in result.scalars().all()]

    async def get_with_steps(self, sequence_id: int) -> Optional[SequenceWithSteps]:
        row = await self._load(sequence_id)
        return SequenceWithSteps.model_validate(row) if row else None

    async def create(self, data: SequenceCreate) -> SequenceWithSteps:
        """Create a sequence with its steps at the end of the list"""
        max_order = await self.db.scalar(select(func.max(SequenceORM.sort_order)))
        row = SequenceORM(
            name=data.name,
            category_id=data.category_id,
            sort_order=(max_order or 0) + 1,
            steps=_step_rows(data.steps),
        )
        self.db.add(row)
        await self.db.commit()
        logger.info(f"Sequence created: {row.id} '{row.name}' with {len(data.steps)} steps")
        return await self.get_with_steps(row.id)

    async def update(self, sequence_id: int, data: SequenceUpdate) -> Optional[SequenceWithSteps]:
        """Update sequence fields; replaces all steps when data.steps is given"""
        row = await self._load(sequence_id)
        if row is None:
            return None

        for key, value in data.model_dump(exclude_unset=True, exclude={"steps"}).items():
            setattr(row, key, value)
        if data.steps is not None:
            row.steps = _step_rows(data.steps)

        await self.db.commit()
        return await self.get_with_steps(sequence_id)

    async def replace_steps(
        self,
        sequence_id: int,
        steps: List[SequenceStepCreate],
    ) -> Optional[SequenceWithSteps]:
        """Rewrite a sequence's steps ordered by step_order, then list position"""
        return await self.update(sequence_id, SequenceUpdate(steps=steps))

    async def delete(self, sequence_id: int) -> bool:
        row = await self._load(sequence_id)
        if row is None:
            return False
        await self.db.delete(row)
        await self.db.commit()
        logger.info(f"Sequence {sequence_id} deleted")
        return True

    async def _load(self, sequence_id: int) -> Optional[SequenceORM]:
        stmt = (
            select(SequenceORM)
            .options(selectinload(SequenceORM.steps))
            .where(SequenceORM.id == sequence_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()
