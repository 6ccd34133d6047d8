"""Completion events published by the playback engines"""
from typing import Optional
from pydantic import BaseModel, ConfigDict

from sequence_timer.models.sequence import SequenceStep
from sequence_timer.models.timer import Timer


class PlaybackEvent(BaseModel):
    """Base class for everything published on the playback event bus"""
    model_config = ConfigDict(frozen=True)


class TimerCompleted(PlaybackEvent):
    """A timer counted down to zero"""
    timer_id: int
    timer: Optional[Timer] = None  # definition snapshot of the finished run


class StepCompleted(PlaybackEvent):
    """One step of a sequence ran out"""
    sequence_id: int
    step_index: int
    step: SequenceStep


class SequenceCompleted(PlaybackEvent):
    """The last step of a sequence ran out"""
    sequence_id: int
