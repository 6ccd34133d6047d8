"""Timer playback engine - live countdown state for standalone timers"""
import logging
from typing import Dict, Optional

from sequence_timer.models.timer import Timer
from sequence_timer.services.playback.base_engine import PlaybackEngine
from sequence_timer.services.playback.models.events import TimerCompleted
from sequence_timer.services.playback.models.playback_state import TimerPlaybackState

logger = logging.getLogger(__name__)


class TimerPlaybackEngine(PlaybackEngine[TimerPlaybackState]):
    """
    Runs standalone timers independently of who is watching them.

    State is kept per timer ID and survives the caller going away; only
    clear() drops it. Reaching zero publishes TimerCompleted on the bus and
    leaves is_complete observable on the state.
    """

    entity_name = "timer"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._timers: Dict[int, Timer] = {}

    def definition(self, timer_id: int) -> Optional[Timer]:
        """Definition snapshot used by the current (or last) run"""
        return self._timers.get(timer_id)

    def initialize(self, timer: Timer) -> TimerPlaybackState:
        """Create an idle state at full duration unless one already exists"""
        def create(current: Optional[TimerPlaybackState]) -> TimerPlaybackState:
            if current is not None:
                return current
            self._timers[timer.id] = timer
            return TimerPlaybackState(
                timer_id=timer.id,
                total_seconds=timer.duration_seconds,
                remaining_seconds=timer.duration_seconds,
            )

        return self._store.update_entry(timer.id, create)

    def start(self, timer: Timer) -> TimerPlaybackState:
        """
        Start or resume a timer.

        An in-progress run continues from its remaining time; a fresh or
        finished one starts at full duration. Any previous loop is cancelled.
        """
        self._loops.cancel(timer.id)
        self._timers[timer.id] = timer
        total = timer.duration_seconds

        def begin(current: Optional[TimerPlaybackState]) -> TimerPlaybackState:
            remaining = total
            if current is not None and current.remaining_seconds > 0:
                remaining = min(current.remaining_seconds, total)
            return TimerPlaybackState(
                timer_id=timer.id,
                total_seconds=total,
                remaining_seconds=remaining,
                is_running=True,
                is_paused=False,
            )

        state = self._store.update_entry(timer.id, begin)
        self._launch(timer.id)
        logger.info(f"Timer {timer.id} started: {state.remaining_seconds}/{total}sec remaining")
        return state

    def reset(self, timer_id: int, timer: Optional[Timer] = None) -> Optional[TimerPlaybackState]:
        """
        Return a timer to full duration, not running.

        Uses the given definition, else the cached one, else the state's own
        total. No-op if none of those exist.
        """
        self._loops.cancel(timer_id)
        if timer is not None:
            self._timers[timer_id] = timer

        cached = self._timers.get(timer_id)

        def fresh(current: Optional[TimerPlaybackState]) -> Optional[TimerPlaybackState]:
            if cached is not None:
                total = cached.duration_seconds
            elif current is not None:
                total = current.total_seconds
            else:
                return current
            return TimerPlaybackState(timer_id=timer_id, total_seconds=total, remaining_seconds=total)

        state = self._store.update_entry(timer_id, fresh)
        if state is not None:
            logger.info(f"Timer {timer_id} reset to {state.total_seconds}sec")
        return state

    def _tick(self, timer_id: int) -> bool:
        state = self._store.get(timer_id)
        if state is None or not state.is_running or state.is_complete:
            return False
        if state.is_paused:
            return True

        finished = False

        def decrement(current: Optional[TimerPlaybackState]) -> Optional[TimerPlaybackState]:
            nonlocal finished
            if current is None or not current.is_running or current.is_paused or current.is_complete:
                return current
            remaining = max(current.remaining_seconds - 1, 0)
            finished = remaining == 0
            return current.model_copy(update={
                "remaining_seconds": remaining,
                "is_running": remaining > 0,
                "is_paused": False,
            })

        self._store.update_entry(timer_id, decrement)
        logger.debug(f"Timer {timer_id} tick")

        if finished:
            logger.info(f"Timer {timer_id} completed")
            self._bus.publish(TimerCompleted(timer_id=timer_id, timer=self._timers.get(timer_id)))
            return False
        return True

    def _forget(self, timer_id: int) -> None:
        self._timers.pop(timer_id, None)
