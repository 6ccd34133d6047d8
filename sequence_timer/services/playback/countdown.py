"""Countdown loop plumbing: tick source and per-entity task registry"""
import asyncio
import logging
from functools import partial
from typing import Coroutine, Dict, Hashable, List

logger = logging.getLogger(__name__)


class Ticker:
    """Paces countdown loops. Tests swap in a manually driven ticker."""

    def __init__(self, interval_seconds: float = 1.0):
        self.interval_seconds = interval_seconds

    async def wait(self) -> None:
        await asyncio.sleep(self.interval_seconds)


class LoopRegistry:
    """
    Tracks the single countdown task allowed per entity ID.

    launch() cancels the previous task for the ID before scheduling the new
    one, so two loops never tick the same entity.
    """

    def __init__(self, name: str):
        self._name = name
        self._tasks: Dict[Hashable, asyncio.Task] = {}

    def launch(self, entity_id: Hashable, coro: Coroutine) -> asyncio.Task:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            coro.close()
            raise

        self.cancel(entity_id)
        task = loop.create_task(coro, name=f"{self._name}-{entity_id}")
        self._tasks[entity_id] = task
        task.add_done_callback(partial(self._on_done, entity_id))
        return task

    def cancel(self, entity_id: Hashable) -> bool:
        """Cancel the loop for an ID. Returns False if none was registered."""
        task = self._tasks.pop(entity_id, None)
        if task is None:
            return False
        task.cancel()
        return True

    def cancel_all(self) -> None:
        for entity_id in list(self._tasks):
            self.cancel(entity_id)

    def is_active(self, entity_id: Hashable) -> bool:
        task = self._tasks.get(entity_id)
        return task is not None and not task.done()

    def active_ids(self) -> List[Hashable]:
        return [entity_id for entity_id, task in self._tasks.items() if not task.done()]

    def _on_done(self, entity_id: Hashable, task: asyncio.Task) -> None:
        if self._tasks.get(entity_id) is task:
            del self._tasks[entity_id]

        if task.cancelled():
            logger.debug(f"{self._name} loop {entity_id} cancelled")
            return

        exc = task.exception()
        if exc is not None:
            logger.error(f"{self._name} loop {entity_id} failed: {exc}", exc_info=exc)
        else:
            logger.debug(f"{self._name} loop {entity_id} finished")
