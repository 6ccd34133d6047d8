"""Timer domain model"""
from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from sequence_timer.models.category import GENERAL_CATEGORY_ID


class NotificationKind(str, Enum):
    """How a finished timer or step announces itself"""
    SILENT = "silent"  # notification only, no sound or vibration
    SOUND = "sound"  # notification with a short sound
    ALARM = "alarm"  # full-screen alarm that must be dismissed


class TimerBase(BaseModel):
    """Base timer fields"""
    label: str = Field(..., min_length=1)
    duration_seconds: int = Field(..., gt=0)
    notification_kind: NotificationKind = NotificationKind.SOUND
    category_id: int = GENERAL_CATEGORY_ID


class TimerCreate(TimerBase):
    """Timer creation model"""
    pass


class TimerUpdate(BaseModel):
    """Timer update model - all fields optional"""
    label: Optional[str] = Field(None, min_length=1)
    duration_seconds: Optional[int] = Field(None, gt=0)
    notification_kind: Optional[NotificationKind] = None
    category_id: Optional[int] = None
    sort_order: Optional[int] = None


class Timer(TimerBase):
    """Complete timer definition. Frozen: the playback engine snapshots it per run."""
    id: int
    sort_order: int = 0
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, frozen=True)
