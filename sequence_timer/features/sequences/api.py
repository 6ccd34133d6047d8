"""Sequence definition API endpoints"""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from sequence_timer.db import get_db
from sequence_timer.features.categories.api import require_category
from sequence_timer.features.sequences.repository import SequenceRepository
from sequence_timer.models.sequence import (
    SequenceCreate,
    SequenceStepCreate,
    SequenceUpdate,
    SequenceWithSteps,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sequences", tags=["sequences"])


class SequenceListResponse(BaseModel):
    sequences: List[SequenceWithSteps]
    count: int


class DeleteResponse(BaseModel):
    success: bool
    message: str


@router.get("", response_model=SequenceListResponse)
async def list_sequences(
    category_id: Optional[int] = Query(None, description="Only sequences in this category"),
    db: AsyncSession = Depends(get_db),
):
    """List sequences with their steps"""
    sequences = await SequenceRepository(db).get_all(category_id)
    return {"sequences": sequences, "count": len(sequences)}


@router.get("/{sequence_id}", response_model=SequenceWithSteps)
async def get_sequence(sequence_id: int, db: AsyncSession = Depends(get_db)):
    sequence = await SequenceRepository(db).get_with_steps(sequence_id)
    if not sequence:
        raise HTTPException(status_code=404, detail="Sequence not found")
    return sequence


@router.post("", response_model=SequenceWithSteps, status_code=201)
async def create_sequence(request: SequenceCreate, db: AsyncSession = Depends(get_db)):
    """Create a sequence; steps play by step_order, then list position"""
    await require_category(db, request.category_id)
    return await SequenceRepository(db).create(request)


@router.patch("/{sequence_id}", response_model=SequenceWithSteps)
async def update_sequence(sequence_id: int, request: SequenceUpdate, db: AsyncSession = Depends(get_db)):
    """
    Update a sequence. When steps are given they replace the existing ones.

    A run in progress keeps its step snapshot until it is started again.
    """
    if request.category_id is not None:
        await require_category(db, request.category_id)

    sequence = await SequenceRepository(db).update(sequence_id, request)
    if not sequence:
        raise HTTPException(status_code=404, detail="Sequence not found")
    return sequence


@router.put("/{sequence_id}/steps", response_model=SequenceWithSteps)
async def replace_steps(
    sequence_id: int,
    steps: List[SequenceStepCreate],
    db: AsyncSession = Depends(get_db),
):
    """Rewrite all steps of a sequence (sequence builder save), ordered by step_order then list position"""
    sequence = await SequenceRepository(db).replace_steps(sequence_id, steps)
    if not sequence:
        raise HTTPException(status_code=404, detail="Sequence not found")
    return sequence


@router.delete("/{sequence_id}", response_model=DeleteResponse)
async def delete_sequence(sequence_id: int, request: Request, db: AsyncSession = Depends(get_db)):
    """Delete a sequence with its steps and drop its playback state"""
    deleted = await SequenceRepository(db).delete(sequence_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Sequence not found")

    request.app.state.sequence_engine.clear(sequence_id)
    return {"success": True, "message": f"Sequence {sequence_id} deleted"}
