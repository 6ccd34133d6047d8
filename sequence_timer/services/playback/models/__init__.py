"""Playback models"""
from .playback_state import TimerPlaybackState, SequencePlaybackState
from .events import PlaybackEvent, TimerCompleted, StepCompleted, SequenceCompleted

__all__ = [
    'TimerPlaybackState', 'SequencePlaybackState',
    'PlaybackEvent', 'TimerCompleted', 'StepCompleted', 'SequenceCompleted',
]
