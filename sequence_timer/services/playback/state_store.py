"""Copy-on-write state store with replay-latest subscriptions"""
import asyncio
import logging
import threading
from types import MappingProxyType
from typing import AsyncIterator, Callable, Generic, List, Mapping, Optional, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")

_MISSING = object()


class _Subscription(Generic[K, V]):
    """
    Conflating slot for one subscriber.
    Only the latest snapshot is kept; a slow reader skips intermediate ones.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop, snapshot: Mapping[K, V]):
        self._loop = loop
        self._latest = snapshot
        self._ready = asyncio.Event()
        # Late subscribers get the current snapshot first
        self._ready.set()

    def push(self, snapshot: Mapping[K, V]) -> None:
        self._latest = snapshot
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is self._loop:
            self._ready.set()
        elif not self._loop.is_closed():
            self._loop.call_soon_threadsafe(self._ready.set)

    async def next(self) -> Mapping[K, V]:
        await self._ready.wait()
        self._ready.clear()
        return self._latest


class StateStore(Generic[K, V]):
    """
    Mapping from entity ID to its current playback state.

    Every update replaces the whole mapping under a lock, so readers see either
    the old or the new mapping in full. The published mapping is read-only.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._states: Mapping[K, V] = MappingProxyType({})
        self._subscribers: List[_Subscription[K, V]] = []

    @property
    def value(self) -> Mapping[K, V]:
        """Current snapshot of the whole mapping"""
        return self._states

    def get(self, key: K) -> Optional[V]:
        return self._states.get(key)

    def update(self, fn: Callable[[Mapping[K, V]], Mapping[K, V]]) -> Mapping[K, V]:
        """
        Apply a read-modify-write to the mapping as one atomic step.

        Args:
            fn: Receives the current mapping and returns the new one. Returning
                the very same object signals "no change" and notifies nobody.

        Returns:
            The mapping in effect after the update
        """
        with self._lock:
            current = self._states
            updated = fn(current)
            if updated is current:
                return current

            snapshot: Mapping[K, V] = MappingProxyType(dict(updated))
            self._states = snapshot
            # Pushed under the lock so subscribers observe updates in commit order
            for subscriber in self._subscribers:
                subscriber.push(snapshot)
            return snapshot

    def update_entry(self, key: K, fn: Callable[[Optional[V]], Optional[V]]) -> Optional[V]:
        """
        Atomically replace the entry for one key.

        fn receives the current entry (or None) and returns the new entry.
        Returning the same object leaves the store untouched; returning None
        removes the key.
        """
        result = None

        def apply(states: Mapping[K, V]) -> Mapping[K, V]:
            nonlocal result
            current = states.get(key)
            new = fn(current)
            result = new
            if new is current:
                return states

            updated = dict(states)
            if new is None:
                updated.pop(key, None)
            else:
                updated[key] = new
            return updated

        self.update(apply)
        return result

    def remove(self, key: K) -> Optional[V]:
        """Drop the entry for a key. Returns the removed entry, None if there was none."""
        removed: Optional[V] = None

        def drop(current: Optional[V]) -> None:
            nonlocal removed
            removed = current
            return None

        self.update_entry(key, drop)
        return removed

    async def stream(self) -> AsyncIterator[Mapping[K, V]]:
        """Yield the current mapping, then every subsequent one"""
        subscription: _Subscription[K, V] = _Subscription(asyncio.get_running_loop(), self._states)
        with self._lock:
            self._subscribers.append(subscription)
            # A commit may have landed between creating the slot and registering it
            subscription.push(self._states)

        try:
            while True:
                yield await subscription.next()
        finally:
            with self._lock:
                self._subscribers.remove(subscription)

    async def stream_for(self, key: K) -> AsyncIterator[Optional[V]]:
        """Yield the entry for one key (None while absent) whenever it changes"""
        previous = _MISSING
        async for states in self.stream():
            current = states.get(key)
            if previous is _MISSING or current != previous:
                previous = current
                yield current

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)
