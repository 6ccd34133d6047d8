"""Timer definition API endpoints"""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from sequence_timer.db import get_db
from sequence_timer.features.categories.api import require_category
from sequence_timer.features.timers.repository import TimerRepository
from sequence_timer.models.timer import Timer, TimerCreate, TimerUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/timers", tags=["timers"])


class TimerListResponse(BaseModel):
    timers: List[Timer]
    count: int


class DeleteResponse(BaseModel):
    success: bool
    message: str


@router.get("", response_model=TimerListResponse)
async def list_timers(
    category_id: Optional[int] = Query(None, description="Only timers in this category"),
    db: AsyncSession = Depends(get_db),
):
    """List timers ordered by sort_order, then creation time"""
    timers = await TimerRepository(db).get_all(category_id)
    return {"timers": timers, "count": len(timers)}


@router.get("/{timer_id}", response_model=Timer)
async def get_timer(timer_id: int, db: AsyncSession = Depends(get_db)):
    timer = await TimerRepository(db).get_by_id(timer_id)
    if not timer:
        raise HTTPException(status_code=404, detail="Timer not found")
    return timer


@router.post("", response_model=Timer, status_code=201)
async def create_timer(request: TimerCreate, db: AsyncSession = Depends(get_db)):
    await require_category(db, request.category_id)
    return await TimerRepository(db).create(request)


@router.patch("/{timer_id}", response_model=Timer)
async def update_timer(timer_id: int, request: TimerUpdate, db: AsyncSession = Depends(get_db)):
    """
    Update a timer definition.

    A run in progress keeps the definition it started with; the change
    applies from the next start.
    """
    if request.category_id is not None:
        await require_category(db, request.category_id)

    timer = await TimerRepository(db).update(timer_id, request)
    if not timer:
        raise HTTPException(status_code=404, detail="Timer not found")
    return timer


@router.delete("/{timer_id}", response_model=DeleteResponse)
async def delete_timer(timer_id: int, request: Request, db: AsyncSession = Depends(get_db)):
    """Delete a timer and drop its playback state"""
    deleted = await TimerRepository(db).delete(timer_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Timer not found")

    request.app.state.timer_engine.clear(timer_id)
    return {"success": True, "message": f"Timer {timer_id} deleted"}
