"""Domain models for the application"""
from .category import (
    Category,
    CategoryCreate,
    CategoryReorder,
    CategoryUpdate,
    DEFAULT_CATEGORIES,
    GENERAL_CATEGORY_ID,
)
from .timer import NotificationKind, Timer, TimerCreate, TimerUpdate
from .sequence import (
    Sequence,
    SequenceCreate,
    SequenceUpdate,
    SequenceStep,
    SequenceStepCreate,
    SequenceWithSteps,
)

__all__ = [
    'Category', 'CategoryCreate', 'CategoryReorder', 'CategoryUpdate', 'DEFAULT_CATEGORIES', 'GENERAL_CATEGORY_ID',
    'NotificationKind', 'Timer', 'TimerCreate', 'TimerUpdate',
    'Sequence', 'SequenceCreate', 'SequenceUpdate',
    'SequenceStep', 'SequenceStepCreate', 'SequenceWithSteps',
]
