"""
Push Notification Service

Delivers completion notifications to devices via the Expo Push API
"""

import httpx
import logging
from typing import List, Optional

from sequence_timer.services.notification.models import (
    ExpoPushMessage,
    ExpoPushTicket,
    Notification,
    NotificationPriority,
    PushDeliveryResult,
)

logger = logging.getLogger(__name__)

EXPO_PUSH_URL = "https://exp.host/--/api/v2/push/send"

# Android channel per priority, matching the app's notification channels
CHANNEL_BY_PRIORITY = {
    NotificationPriority.DEFAULT: "timer_silent",
    NotificationPriority.HIGH: "timer_sound",
    NotificationPriority.MAX: "timer_alarm",
}


class PushDeliveryError(Exception):
    """Expo rejected the whole request"""
    pass


class LoggingNotificationSink:
    """Writes notifications to the log. Always installed."""

    async def send(self, notification: Notification) -> None:
        logger.info(
            f"[{notification.priority.value}] {notification.title}: {notification.body}"
        )


class ExpoPushNotificationSink:
    """Service for sending push notifications via Expo"""

    def __init__(
        self,
        tokens: List[str],
        url: str = EXPO_PUSH_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.tokens = list(tokens)
        self.url = url
        self._transport = transport

    def build_messages(self, notification: Notification) -> List[ExpoPushMessage]:
        return [
            ExpoPushMessage(
                to=token,
                title=notification.title,
                body=notification.body,
                data=notification.data,
                sound="default" if notification.sound else None,
                priority="normal" if notification.priority == NotificationPriority.DEFAULT else "high",
                channelId=CHANNEL_BY_PRIORITY[notification.priority],
            )
            for token in self.tokens
        ]

    async def send(self, notification: Notification) -> PushDeliveryResult:
        """
        Send push notification via Expo Push API

        Args:
            notification: Notification to deliver to every registered token

        Returns:
            PushDeliveryResult with per-device tickets

        Raises:
            PushDeliveryError: If Expo answers with a non-200 status
        """
        if not self.tokens:
            return PushDeliveryResult(success=False, sent=0, failed=0)

        tokens = list(self.tokens)
        messages = [
            message.model_dump(exclude_none=True)
            for message in self.build_messages(notification)
        ]

        async with httpx.AsyncClient(transport=self._transport) as client:
            expo_response = await client.post(
                self.url,
                json=messages,
                headers={
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                    "Accept-Encoding": "gzip, deflate",
                },
                timeout=10.0,
            )

        if expo_response.status_code != 200:
            raise PushDeliveryError(f"Failed to send push notification: {expo_response.text}")

        tickets = [ExpoPushTicket(**t) for t in expo_response.json().get("data", [])]

        # Tickets come back in message order
        failed = 0
        for i, ticket in enumerate(tickets):
            if ticket.status != "error":
                continue
            failed += 1
            error_type = (ticket.details or {}).get("error")
            error_message = ticket.message or ""
            if error_type == "DeviceNotRegistered" or "not registered" in error_message:
                if i < len(tokens) and tokens[i] in self.tokens:
                    self.tokens.remove(tokens[i])
                    logger.info(f"Removed invalid token: {tokens[i]}")

        sent = len(tickets) - failed
        logger.info(f"Push notification '{notification.title}' sent={sent}, failed={failed}")
        return PushDeliveryResult(success=sent > 0, sent=sent, failed=failed, tickets=tickets)
