"""Turns playback completion events into user notifications"""
import asyncio
import logging
from typing import Callable, List, Mapping, Optional, Protocol, Set

from sequence_timer.models.timer import NotificationKind
from sequence_timer.services.notification.models import Notification, NotificationPriority
from sequence_timer.services.playback.event_bus import EventBus
from sequence_timer.services.playback.models.events import (
    SequenceCompleted,
    StepCompleted,
    TimerCompleted,
)
from sequence_timer.services.playback.models.playback_state import TimerPlaybackState
from sequence_timer.utils.time_format import format_clock

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    async def send(self, notification: Notification) -> object: ...


def build_notification(kind: NotificationKind, title: str, body: str, **data) -> Notification:
    """Shape a notification according to its kind (silent, sound, alarm)"""
    if kind == NotificationKind.SILENT:
        return Notification(title=title, body=body, kind=kind, data=data)
    if kind == NotificationKind.ALARM:
        return Notification(
            title=title,
            body=body,
            kind=kind,
            priority=NotificationPriority.MAX,
            sound=True,
            sticky=True,
            data=data,
        )
    return Notification(
        title=title,
        body=body,
        kind=kind,
        priority=NotificationPriority.HIGH,
        sound=True,
        data=data,
    )


def timer_notification(event: TimerCompleted) -> Notification:
    timer = event.timer
    label = timer.label if timer else "Timer"
    kind = timer.notification_kind if timer else NotificationKind.SOUND
    title = "Timer Alarm!" if kind == NotificationKind.ALARM else "Timer Complete"
    return build_notification(kind, title, f"{label} has finished", timer_id=event.timer_id)


def step_notification(event: StepCompleted) -> Notification:
    return build_notification(
        event.step.notification_kind,
        f"{event.step.label} complete",
        f"Step {event.step_index + 1} finished",
        sequence_id=event.sequence_id,
        step_id=event.step.id,
    )


def sequence_notification(event: SequenceCompleted) -> Notification:
    return build_notification(
        NotificationKind.SOUND,
        "Sequence Complete",
        "All steps have finished",
        sequence_id=event.sequence_id,
    )


def ongoing_summary(
    states: Mapping[int, TimerPlaybackState],
    labels: Mapping[int, str],
) -> Optional[str]:
    """Ongoing-notification line for the first running timer, e.g. 'Tea - 2:05 remaining'"""
    for timer_id, state in states.items():
        if state.is_running and not state.is_complete:
            label = labels.get(timer_id) or "Timer"
            return f"{label} - {format_clock(state.remaining_seconds)} remaining"
    return None


class NotificationDispatcher:
    """
    Subscribes to the playback event bus and fans notifications out to sinks.

    Event handlers run inside the countdown tick, so delivery is moved onto
    its own task and never blocks or fails the tick.
    """

    def __init__(self, bus: EventBus, sinks: List[NotificationSink]):
        self._bus = bus
        self._sinks = list(sinks)
        self._unsubscribers: List[Callable[[], None]] = []
        self._pending: Set[asyncio.Task] = set()

    def start(self) -> None:
        if self._unsubscribers:
            return
        self._unsubscribers = [
            self._bus.subscribe(TimerCompleted, self._on_timer_completed),
            self._bus.subscribe(StepCompleted, self._on_step_completed),
            self._bus.subscribe(SequenceCompleted, self._on_sequence_completed),
        ]
        logger.info(f"Notification dispatcher started with {len(self._sinks)} sink(s)")

    def stop(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    async def drain(self) -> None:
        """Wait for in-flight deliveries"""
        if self._pending:
            await asyncio.gather(*list(self._pending))

    def _on_timer_completed(self, event: TimerCompleted) -> None:
        self.dispatch(timer_notification(event))

    def _on_step_completed(self, event: StepCompleted) -> None:
        self.dispatch(step_notification(event))

    def _on_sequence_completed(self, event: SequenceCompleted) -> None:
        self.dispatch(sequence_notification(event))

    def dispatch(self, notification: Notification) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(self._deliver(notification))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _deliver(self, notification: Notification) -> None:
        for sink in self._sinks:
            try:
                await sink.send(notification)
            except Exception as e:
                logger.error(f"Error delivering notification '{notification.title}' via {type(sink).__name__}: {e}")
