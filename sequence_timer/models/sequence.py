"""Sequence domain models"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, computed_field

from sequence_timer.models.category import GENERAL_CATEGORY_ID
from sequence_timer.models.timer import NotificationKind


class SequenceStepBase(BaseModel):
    """Base step fields"""
    label: str = Field(..., min_length=1)
    duration_seconds: int = Field(..., gt=0)
    notification_kind: NotificationKind = NotificationKind.SOUND
    step_order: int = 0


class SequenceStepCreate(SequenceStepBase):
    """Step creation model (sequence_id comes from the parent)"""
    pass


class SequenceStep(SequenceStepBase):
    """A single timed step within a sequence"""
    id: int
    sequence_id: int

    model_config = ConfigDict(from_attributes=True, frozen=True)


class SequenceBase(BaseModel):
    """Base sequence fields"""
    name: str = Field(..., min_length=1)
    category_id: int = GENERAL_CATEGORY_ID


class SequenceCreate(SequenceBase):
    """Sequence creation model"""
    steps: List[SequenceStepCreate] = Field(default_factory=list)


class SequenceUpdate(BaseModel):
    """Sequence update model - steps are replaced wholesale when given"""
    name: Optional[str] = Field(None, min_length=1)
    category_id: Optional[int] = None
    sort_order: Optional[int] = None
    steps: Optional[List[SequenceStepCreate]] = None


class Sequence(SequenceBase):
    """Complete sequence model from database"""
    id: int
    sort_order: int = 0
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, frozen=True)


class SequenceWithSteps(Sequence):
    """Sequence with all of its steps loaded. Totals are included in API responses for the library list."""
    steps: List[SequenceStep] = Field(default_factory=list)

    @computed_field  # type: ignore[misc]
    @property
    def total_duration_seconds(self) -> int:
        return sum(step.duration_seconds for step in self.steps)

    @computed_field  # type: ignore[misc]
    @property
    def step_count(self) -> int:
        return len(self.steps)

    @property
    def sorted_steps(self) -> List[SequenceStep]:
        return sorted(self.steps, key=lambda step: step.step_order)
