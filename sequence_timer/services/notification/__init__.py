"""Notification delivery for playback completion events"""
from .dispatcher import NotificationDispatcher, NotificationSink, build_notification, ongoing_summary
from .models import Notification, NotificationPriority, PushDeliveryResult
from .push_notification_service import (
    ExpoPushNotificationSink,
    LoggingNotificationSink,
    PushDeliveryError,
)

__all__ = [
    'NotificationDispatcher', 'NotificationSink', 'build_notification', 'ongoing_summary',
    'Notification', 'NotificationPriority', 'PushDeliveryResult',
    'ExpoPushNotificationSink', 'LoggingNotificationSink', 'PushDeliveryError',
]
