"""Behaviour shared by the timer and sequence playback engines"""
import logging
from typing import AsyncIterator, Generic, List, Mapping, Optional, TypeVar

from sequence_timer.services.playback.countdown import LoopRegistry, Ticker
from sequence_timer.services.playback.event_bus import EventBus
from sequence_timer.services.playback.state_store import StateStore

logger = logging.getLogger(__name__)

S = TypeVar("S")


class PlaybackEngine(Generic[S]):
    """
    Owns live playback state for one kind of entity.

    Subclasses implement start/reset and _tick(). Everything here is keyed by
    entity ID and is a no-op for IDs without state.
    """

    entity_name = "entity"

    def __init__(self, bus: Optional[EventBus] = None, ticker: Optional[Ticker] = None):
        self._store: StateStore[int, S] = StateStore()
        self._loops = LoopRegistry(self.entity_name)
        self._bus = bus or EventBus()
        self._ticker = ticker or Ticker()

    @property
    def bus(self) -> EventBus:
        return self._bus

    # ---- Read access ----

    def get_state(self, entity_id: int) -> Optional[S]:
        return self._store.get(entity_id)

    def all_states(self) -> Mapping[int, S]:
        return self._store.value

    def state_stream(self, entity_id: int) -> AsyncIterator[Optional[S]]:
        return self._store.stream_for(entity_id)

    def all_states_stream(self) -> AsyncIterator[Mapping[int, S]]:
        return self._store.stream()

    def has_running(self) -> bool:
        """True if any entity is actively counting down (running and not paused)"""
        return any(state.is_running and not state.is_paused for state in self._store.value.values())

    def running_ids(self) -> List[int]:
        return [entity_id for entity_id, state in self._store.value.items() if state.is_running]

    def is_loop_active(self, entity_id: int) -> bool:
        return self._loops.is_active(entity_id)

    # ---- Controls ----

    def pause(self, entity_id: int) -> Optional[S]:
        return self._store.update_entry(
            entity_id,
            lambda current: current if current is None else current.model_copy(update={"is_paused": True}),
        )

    def resume(self, entity_id: int) -> Optional[S]:
        return self._store.update_entry(
            entity_id,
            lambda current: current if current is None else current.model_copy(update={"is_paused": False}),
        )

    def stop(self, entity_id: int) -> Optional[S]:
        """Stop ticking but keep the remaining time, e.g. when the user walks away"""
        self._loops.cancel(entity_id)
        state = self._store.update_entry(
            entity_id,
            lambda current: current if current is None else current.model_copy(
                update={"is_running": False, "is_paused": False}
            ),
        )
        if state is not None:
            logger.info(f"{self.entity_name} {entity_id} stopped")
        return state

    def clear(self, entity_id: int) -> None:
        """Drop all playback state for an entity. Irreversible."""
        self._loops.cancel(entity_id)
        self._forget(entity_id)
        if self._store.remove(entity_id) is not None:
            logger.info(f"{self.entity_name} {entity_id} cleared")

    def shutdown(self) -> None:
        """Cancel every countdown loop; state is left as-is"""
        self._loops.cancel_all()

    # ---- Countdown loop ----

    def _launch(self, entity_id: int) -> None:
        self._loops.launch(entity_id, self._run(entity_id))

    async def _run(self, entity_id: int) -> None:
        while True:
            await self._ticker.wait()
            if not self._tick(entity_id):
                break

    def _tick(self, entity_id: int) -> bool:
        """Advance one entity by one tick. Returns False when the loop should end."""
        raise NotImplementedError

    def _forget(self, entity_id: int) -> None:
        """Drop cached definitions for an entity"""
        pass
