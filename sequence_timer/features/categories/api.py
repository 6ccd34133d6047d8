"""Category API endpoints"""

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from sequence_timer.db import get_db
from sequence_timer.features.categories.repository import CategoryRepository
from sequence_timer.models.category import Category, CategoryCreate, CategoryReorder, CategoryUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/categories", tags=["categories"])


class DeleteResponse(BaseModel):
    success: bool
    message: str


async def require_category(db: AsyncSession, category_id: int) -> Category:
    """Look up a category or raise 404"""
    category = await CategoryRepository(db).get_by_id(category_id)
    if category is None:
        raise HTTPException(status_code=404, detail=f"Category {category_id} not found")
    return category


@router.get("", response_model=List[Category])
async def list_categories(db: AsyncSession = Depends(get_db)):
    """List all categories ordered by sort_order"""
    return await CategoryRepository(db).get_all()


@router.post("", response_model=Category, status_code=201)
async def create_category(request: CategoryCreate, db: AsyncSession = Depends(get_db)):
    return await CategoryRepository(db).create(request)


@router.put("/order", response_model=List[Category])
async def reorder_categories(request: CategoryReorder, db: AsyncSession = Depends(get_db)):
    """Reorder categories; each ID gets its position in the list as sort_order"""
    return await CategoryRepository(db).reorder(request.ordered_ids)


@router.patch("/{category_id}", response_model=Category)
async def update_category(category_id: int, request: CategoryUpdate, db: AsyncSession = Depends(get_db)):
    category = await CategoryRepository(db).update(category_id, request)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@router.delete("/{category_id}", response_model=DeleteResponse)
async def delete_category(category_id: int, db: AsyncSession = Depends(get_db)):
    """
    Delete a category.

    Timers and sequences in it are moved to General. Default categories
    cannot be deleted (409).
    """
    try:
        deleted = await CategoryRepository(db).delete(category_id)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))

    if not deleted:
        raise HTTPException(status_code=404, detail="Category not found")
    return {"success": True, "message": f"Category {category_id} deleted"}
