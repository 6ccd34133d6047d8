"""Playback engines - live countdown state for timers and sequences"""
from .countdown import LoopRegistry, Ticker
from .event_bus import EventBus
from .state_store import StateStore
from .timer_engine import TimerPlaybackEngine
from .sequence_engine import SequencePlaybackEngine
from .models import (
    TimerPlaybackState,
    SequencePlaybackState,
    PlaybackEvent,
    TimerCompleted,
    StepCompleted,
    SequenceCompleted,
)

__all__ = [
    'LoopRegistry', 'Ticker', 'EventBus', 'StateStore',
    'TimerPlaybackEngine', 'SequencePlaybackEngine',
    'TimerPlaybackState', 'SequencePlaybackState',
    'PlaybackEvent', 'TimerCompleted', 'StepCompleted', 'SequenceCompleted',
]
