"""Shared fixtures: a hand-driven ticker, engines, definitions and an API client."""
from __future__ import annotations

import asyncio
from typing import List

import httpx
import pytest

from sequence_timer.main import create_app
from sequence_timer.models.sequence import SequenceStep, SequenceWithSteps
from sequence_timer.models.timer import NotificationKind, Timer
from sequence_timer.services.playback import (
    EventBus,
    SequencePlaybackEngine,
    Ticker,
    TimerPlaybackEngine,
)


async def settle(rounds: int = 10) -> None:
    """Let scheduled tasks run until they block again."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class ManualTicker(Ticker):
    """Ticker that only fires when the test calls advance()."""

    def __init__(self) -> None:
        super().__init__(interval_seconds=0)
        self._waiters: List[asyncio.Future] = []

    async def wait(self) -> None:
        future = asyncio.get_running_loop().create_future()
        self._waiters.append(future)
        await future

    @property
    def waiting(self) -> int:
        return sum(1 for future in self._waiters if not future.done())

    async def advance(self, ticks: int = 1) -> None:
        for _ in range(ticks):
            await settle()
            waiters, self._waiters = self._waiters, []
            for future in waiters:
                if not future.done():
                    future.set_result(None)
            await settle()


def make_timer(timer_id: int = 1, duration: int = 5, label: str = "Tea",
               kind: NotificationKind = NotificationKind.SOUND) -> Timer:
    return Timer(id=timer_id, label=label, duration_seconds=duration, notification_kind=kind)


def make_sequence(sequence_id: int = 1, durations=(2, 3), name: str = "Flow") -> SequenceWithSteps:
    steps = [
        SequenceStep(
            id=sequence_id * 100 + index,
            sequence_id=sequence_id,
            label=f"Step {index + 1}",
            duration_seconds=duration,
            step_order=index,
        )
        for index, duration in enumerate(durations)
    ]
    return SequenceWithSteps(id=sequence_id, name=name, steps=steps)


@pytest.fixture
def ticker() -> ManualTicker:
    return ManualTicker()


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
async def timer_engine(bus, ticker):
    engine = TimerPlaybackEngine(bus=bus, ticker=ticker)
    yield engine
    engine.shutdown()
    await settle()


@pytest.fixture
async def sequence_engine(bus, ticker):
    engine = SequencePlaybackEngine(bus=bus, ticker=ticker)
    yield engine
    engine.shutdown()
    await settle()


@pytest.fixture
async def app(ticker):
    application = create_app(database_url="sqlite:///:memory:", ticker=ticker, push_tokens=[])
    async with application.router.lifespan_context(application):
        yield application


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client
