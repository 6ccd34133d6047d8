"""Playback state models"""
from typing import Optional, Sequence as SequenceT
from pydantic import BaseModel, ConfigDict, computed_field

from sequence_timer.models.sequence import SequenceStep


class TimerPlaybackState(BaseModel):
    """Progress of one timer run. Immutable; every update replaces the snapshot."""
    timer_id: int
    total_seconds: int
    remaining_seconds: int
    is_running: bool = False
    is_paused: bool = False  # paused keeps is_running=True: session active, ticking suspended

    model_config = ConfigDict(frozen=True)

    @computed_field  # type: ignore[misc]
    @property
    def is_complete(self) -> bool:
        return self.remaining_seconds <= 0

    @computed_field  # type: ignore[misc]
    @property
    def progress(self) -> float:
        """Fraction of the run still remaining (1.0 when fresh, 0.0 when done)"""
        if self.total_seconds <= 0:
            return 0.0
        return self.remaining_seconds / self.total_seconds


class SequencePlaybackState(BaseModel):
    """Progress of one sequence run"""
    sequence_id: int
    current_step_index: int = 0
    current_step_remaining_seconds: int = 0
    is_running: bool = False
    is_paused: bool = False
    is_complete: bool = False

    model_config = ConfigDict(frozen=True)

    def current_step(self, steps: SequenceT[SequenceStep]) -> Optional[SequenceStep]:
        """Step being played, given the run's sorted step list"""
        if 0 <= self.current_step_index < len(steps):
            return steps[self.current_step_index]
        return None

    def next_step(self, steps: SequenceT[SequenceStep]) -> Optional[SequenceStep]:
        next_index = self.current_step_index + 1
        if 0 <= next_index < len(steps):
            return steps[next_index]
        return None
