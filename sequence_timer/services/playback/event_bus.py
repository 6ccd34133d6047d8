"""In-process publish/subscribe bus for playback events"""
import logging
import threading
from typing import Callable, Dict, List, Type, TypeVar

from sequence_timer.services.playback.models.events import PlaybackEvent

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=PlaybackEvent)
Handler = Callable[[E], None]


class EventBus:
    """
    Synchronous pub/sub keyed by event class.

    publish() calls every handler for the event's type in registration order,
    on the caller's thread. A handler that raises stops delivery and the
    exception reaches the publisher.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscribers: Dict[Type[PlaybackEvent], List[Callable]] = {}

    def subscribe(self, event_type: Type[E], handler: Handler) -> Callable[[], None]:
        """Register a handler; returns a callable that unregisters it"""
        with self._lock:
            self._subscribers.setdefault(event_type, []).append(handler)

        def unsubscribe() -> None:
            self.unsubscribe(event_type, handler)

        return unsubscribe

    def unsubscribe(self, event_type: Type[E], handler: Handler) -> None:
        with self._lock:
            handlers = self._subscribers.get(event_type)
            if handlers is None:
                return
            try:
                handlers.remove(handler)
            except ValueError:
                pass

    def publish(self, event: PlaybackEvent) -> None:
        with self._lock:
            handlers = list(self._subscribers.get(type(event), []))

        logger.debug(f"Publishing {type(event).__name__} to {len(handlers)} handler(s)")
        for handler in handlers:
            handler(event)

    def handler_count(self, event_type: Type[PlaybackEvent]) -> int:
        return len(self._subscribers.get(event_type, []))
