"""Category domain model"""
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


GENERAL_CATEGORY_ID = 1


class CategoryBase(BaseModel):
    """Base category fields"""
    name: str = Field(..., min_length=1)
    icon: Optional[str] = None  # Material icon name or emoji
    color: Optional[int] = None  # ARGB color value


class CategoryCreate(CategoryBase):
    """Category creation model"""
    pass


class CategoryUpdate(BaseModel):
    """Category update model - all fields optional"""
    name: Optional[str] = Field(None, min_length=1)
    icon: Optional[str] = None
    color: Optional[int] = None
    sort_order: Optional[int] = None


class CategoryReorder(BaseModel):
    """New category order, first ID first"""
    ordered_ids: List[int] = Field(..., min_length=1)


class Category(CategoryBase):
    """Complete category model from database"""
    id: int
    sort_order: int = 0
    is_default: bool = False  # Default categories cannot be deleted

    model_config = ConfigDict(from_attributes=True)


# Created on first startup
DEFAULT_CATEGORIES = [
    Category(id=1, name="General", icon="timer", sort_order=0, is_default=True),
    Category(id=2, name="Yoga", icon="self_improvement", sort_order=1, is_default=True),
    Category(id=3, name="Workout", icon="fitness_center", sort_order=2, is_default=True),
    Category(id=4, name="Cooking", icon="restaurant", sort_order=3, is_default=True),
    Category(id=5, name="Pomodoro", icon="work", sort_order=4, is_default=True),
]
