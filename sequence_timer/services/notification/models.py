"""Notification models"""
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from sequence_timer.models.timer import NotificationKind


class NotificationPriority(str, Enum):
    """Delivery priority, mirrors the notification kind"""
    DEFAULT = "default"
    HIGH = "high"
    MAX = "max"


class Notification(BaseModel):
    """A user-facing completion notification, independent of delivery channel"""
    title: str
    body: str
    kind: NotificationKind = NotificationKind.SOUND
    priority: NotificationPriority = NotificationPriority.DEFAULT
    sound: bool = False
    sticky: bool = False  # stays until dismissed (alarms)
    data: Dict[str, Any] = Field(default_factory=dict)


class ExpoPushMessage(BaseModel):
    """Expo push notification message format"""
    to: str
    title: str
    body: str
    data: Optional[Dict[str, Any]] = None
    sound: Optional[str] = "default"
    priority: str = "high"
    channelId: str = "default"


class ExpoPushTicket(BaseModel):
    """Expo push notification response ticket"""
    status: str
    id: Optional[str] = None
    message: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


class PushDeliveryResult(BaseModel):
    """Outcome of one push delivery"""
    success: bool
    sent: int
    failed: int
    tickets: List[ExpoPushTicket] = Field(default_factory=list)
