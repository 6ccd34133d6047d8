"""Request and response schemas for the playback API"""

from typing import Dict, List, Optional
from pydantic import BaseModel

from sequence_timer.models.sequence import SequenceStep, SequenceWithSteps
from sequence_timer.models.timer import Timer
from sequence_timer.services.playback.models.playback_state import (
    SequencePlaybackState,
    TimerPlaybackState,
)


class TimerPlaybackView(BaseModel):
    """Timer definition joined with its live playback state"""
    timer: Timer
    state: Optional[TimerPlaybackState] = None
    remaining_display: str


class SequencePlaybackView(BaseModel):
    """Sequence definition joined with its live playback state"""
    sequence: SequenceWithSteps
    state: Optional[SequencePlaybackState] = None
    current_step: Optional[SequenceStep] = None
    next_step: Optional[SequenceStep] = None
    total_steps: int
    remaining_seconds: int
    remaining_display: str
    step_progress: float = 1.0  # remaining fraction of the current step
    overall_progress: float = 0.0  # elapsed fraction of the whole sequence


class TimerStatesResponse(BaseModel):
    states: Dict[int, TimerPlaybackState]
    running_ids: List[int]


class SequenceStatesResponse(BaseModel):
    states: Dict[int, SequencePlaybackState]
    running_ids: List[int]


class OngoingSummaryResponse(BaseModel):
    """Text for the ongoing notification, None when nothing runs"""
    summary: Optional[str] = None
    has_running_timers: bool
    has_running_sequences: bool


class ClearResponse(BaseModel):
    success: bool
    message: str
