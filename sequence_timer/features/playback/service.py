"""Business logic for playback: loads definitions and drives the engines"""

import logging
from typing import Optional, Sequence as SequenceT

from sequence_timer.features.playback.definitions import DefinitionSource
from sequence_timer.features.playback.schemas import (
    OngoingSummaryResponse,
    SequencePlaybackView,
    SequenceStatesResponse,
    TimerPlaybackView,
    TimerStatesResponse,
)
from sequence_timer.models.sequence import SequenceStep, SequenceWithSteps
from sequence_timer.models.timer import Timer
from sequence_timer.services.notification.dispatcher import ongoing_summary
from sequence_timer.services.playback.models.playback_state import (
    SequencePlaybackState,
    TimerPlaybackState,
)
from sequence_timer.services.playback.sequence_engine import SequencePlaybackEngine
from sequence_timer.services.playback.timer_engine import TimerPlaybackEngine
from sequence_timer.utils.time_format import format_clock

logger = logging.getLogger(__name__)


def build_timer_view(timer: Timer, state: Optional[TimerPlaybackState]) -> TimerPlaybackView:
    remaining = state.remaining_seconds if state else timer.duration_seconds
    return TimerPlaybackView(timer=timer, state=state, remaining_display=format_clock(remaining))


def build_sequence_view(
    sequence: SequenceWithSteps,
    state: Optional[SequencePlaybackState],
    steps: SequenceT[SequenceStep],
) -> SequencePlaybackView:
    """
    Join a sequence with its playback state.

    Progress mirrors the playback screen: step_progress is the remaining
    fraction of the current step, overall_progress the elapsed fraction of
    the whole sequence.
    """
    current_step = state.current_step(steps) if state else None
    next_step = state.next_step(steps) if state else None

    if state is not None:
        remaining = state.current_step_remaining_seconds
    elif steps:
        remaining = steps[0].duration_seconds
    else:
        remaining = 0

    step_progress = 1.0
    if current_step is not None and current_step.duration_seconds > 0:
        step_progress = remaining / current_step.duration_seconds

    # Totals follow the run's step snapshot, which can differ from the stored definition
    total_duration = sequence.model_copy(update={"steps": list(steps)}).total_duration_seconds
    overall_progress = 0.0
    if total_duration > 0 and state is not None:
        completed = sum(step.duration_seconds for step in steps[:state.current_step_index])
        elapsed = (current_step.duration_seconds if current_step else 0) - remaining
        overall_progress = (completed + elapsed) / total_duration

    return SequencePlaybackView(
        sequence=sequence,
        state=state,
        current_step=current_step,
        next_step=next_step,
        total_steps=len(steps),
        remaining_seconds=remaining,
        remaining_display=format_clock(remaining),
        step_progress=step_progress,
        overall_progress=overall_progress,
    )


class PlaybackService:
    """Service layer between the playback API and the engines"""

    def __init__(
        self,
        timer_engine: TimerPlaybackEngine,
        sequence_engine: SequencePlaybackEngine,
        definitions: DefinitionSource,
    ):
        self.timers = timer_engine
        self.sequences = sequence_engine
        self.definitions = definitions

    # ---- Timers ----

    async def _require_timer(self, timer_id: int) -> Timer:
        timer = await self.definitions.get_timer_definition(timer_id)
        if timer is None:
            raise ValueError(f"Timer {timer_id} not found")
        return timer

    async def get_timer(self, timer_id: int) -> TimerPlaybackView:
        """Load a timer and make sure it has (idle) playback state"""
        timer = await self._require_timer(timer_id)
        state = self.timers.initialize(timer)
        return build_timer_view(timer, state)

    async def start_timer(self, timer_id: int) -> TimerPlaybackView:
        timer = await self._require_timer(timer_id)
        return build_timer_view(timer, self.timers.start(timer))

    async def pause_timer(self, timer_id: int) -> TimerPlaybackView:
        timer = await self._require_timer(timer_id)
        return build_timer_view(timer, self.timers.pause(timer_id))

    async def resume_timer(self, timer_id: int) -> TimerPlaybackView:
        timer = await self._require_timer(timer_id)
        return build_timer_view(timer, self.timers.resume(timer_id))

    async def reset_timer(self, timer_id: int) -> TimerPlaybackView:
        timer = await self._require_timer(timer_id)
        return build_timer_view(timer, self.timers.reset(timer_id, timer))

    async def stop_timer(self, timer_id: int) -> TimerPlaybackView:
        timer = await self._require_timer(timer_id)
        return build_timer_view(timer, self.timers.stop(timer_id))

    def clear_timer(self, timer_id: int) -> None:
        self.timers.clear(timer_id)

    def timer_states(self) -> TimerStatesResponse:
        return TimerStatesResponse(
            states=dict(self.timers.all_states()),
            running_ids=self.timers.running_ids(),
        )

    # ---- Sequences ----

    async def _require_sequence(self, sequence_id: int) -> SequenceWithSteps:
        sequence = await self.definitions.get_sequence_with_steps(sequence_id)
        if sequence is None:
            raise ValueError(f"Sequence {sequence_id} not found")
        return sequence

    def _sequence_view(
        self,
        sequence: SequenceWithSteps,
        state: Optional[SequencePlaybackState],
    ) -> SequencePlaybackView:
        steps = self.sequences.steps_for(sequence.id) or tuple(sequence.sorted_steps)
        return build_sequence_view(sequence, state, steps)

    async def get_sequence(self, sequence_id: int) -> SequencePlaybackView:
        sequence = await self._require_sequence(sequence_id)
        return self._sequence_view(sequence, self.sequences.initialize(sequence))

    async def start_sequence(self, sequence_id: int) -> SequencePlaybackView:
        """
        Start or resume a sequence.

        Raises:
            ValueError: If the sequence does not exist
        """
        sequence = await self._require_sequence(sequence_id)
        return self._sequence_view(sequence, self.sequences.start(sequence))

    async def pause_sequence(self, sequence_id: int) -> SequencePlaybackView:
        sequence = await self._require_sequence(sequence_id)
        return self._sequence_view(sequence, self.sequences.pause(sequence_id))

    async def resume_sequence(self, sequence_id: int) -> SequencePlaybackView:
        sequence = await self._require_sequence(sequence_id)
        return self._sequence_view(sequence, self.sequences.resume(sequence_id))

    async def reset_sequence(self, sequence_id: int) -> SequencePlaybackView:
        sequence = await self._require_sequence(sequence_id)
        return self._sequence_view(sequence, self.sequences.reset(sequence_id, sequence))

    async def stop_sequence(self, sequence_id: int) -> SequencePlaybackView:
        sequence = await self._require_sequence(sequence_id)
        return self._sequence_view(sequence, self.sequences.stop(sequence_id))

    async def skip_next(self, sequence_id: int) -> SequencePlaybackView:
        sequence = await self._require_sequence(sequence_id)
        return self._sequence_view(sequence, self.sequences.skip_next(sequence_id))

    async def skip_previous(self, sequence_id: int) -> SequencePlaybackView:
        sequence = await self._require_sequence(sequence_id)
        return self._sequence_view(sequence, self.sequences.skip_previous(sequence_id))

    def clear_sequence(self, sequence_id: int) -> None:
        self.sequences.clear(sequence_id)

    def sequence_states(self) -> SequenceStatesResponse:
        return SequenceStatesResponse(
            states=dict(self.sequences.all_states()),
            running_ids=self.sequences.running_ids(),
        )

    # ---- Summary ----

    def summary(self) -> OngoingSummaryResponse:
        states = self.timers.all_states()
        labels = {}
        for timer_id in states:
            timer = self.timers.definition(timer_id)
            if timer is not None:
                labels[timer_id] = timer.label

        return OngoingSummaryResponse(
            summary=ongoing_summary(states, labels),
            has_running_timers=self.timers.has_running(),
            has_running_sequences=self.sequences.has_running(),
        )
