"""Sequence playback engine - advances multi-step sequences over time"""
import logging
from typing import Callable, Dict, Optional, Tuple

from sequence_timer.models.sequence import SequenceStep, SequenceWithSteps
from sequence_timer.services.playback.base_engine import PlaybackEngine
from sequence_timer.services.playback.models.events import SequenceCompleted, StepCompleted
from sequence_timer.services.playback.models.playback_state import SequencePlaybackState

logger = logging.getLogger(__name__)


class SequencePlaybackEngine(PlaybackEngine[SequencePlaybackState]):
    """
    Plays sequences step by step, with pause, resume and skipping.

    The sorted step list is snapshotted on initialize/start and read-only
    until the next start or clear. Each finished step publishes StepCompleted;
    the last one additionally publishes SequenceCompleted, once per run.
    """

    entity_name = "sequence"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._steps: Dict[int, Tuple[SequenceStep, ...]] = {}

    def steps_for(self, sequence_id: int) -> Tuple[SequenceStep, ...]:
        """Step snapshot of the current (or last) run, in play order"""
        return self._steps.get(sequence_id, ())

    def on_step_complete(self, handler: Callable[[StepCompleted], None]) -> Callable[[], None]:
        return self._bus.subscribe(StepCompleted, handler)

    def on_sequence_complete(self, handler: Callable[[SequenceCompleted], None]) -> Callable[[], None]:
        return self._bus.subscribe(SequenceCompleted, handler)

    def initialize(self, sequence: SequenceWithSteps) -> Optional[SequencePlaybackState]:
        """Create an idle state at the first step unless one exists. Empty sequences are ignored."""
        steps = tuple(sequence.sorted_steps)
        if not steps:
            return self._store.get(sequence.id)

        def create(current: Optional[SequencePlaybackState]) -> SequencePlaybackState:
            if current is not None:
                return current
            self._steps[sequence.id] = steps
            return SequencePlaybackState(
                sequence_id=sequence.id,
                current_step_index=0,
                current_step_remaining_seconds=steps[0].duration_seconds,
            )

        return self._store.update_entry(sequence.id, create)

    def start(self, sequence: SequenceWithSteps) -> Optional[SequencePlaybackState]:
        """
        Start or resume a sequence.

        Resumes at the current step and remaining time of an unfinished run;
        a new or completed run starts at step 0. No-op for a sequence without
        steps.
        """
        steps = tuple(sequence.sorted_steps)
        if not steps:
            logger.warning(f"Sequence {sequence.id} has no steps, not starting")
            return self._store.get(sequence.id)

        self._loops.cancel(sequence.id)
        self._steps[sequence.id] = steps

        def begin(current: Optional[SequencePlaybackState]) -> SequencePlaybackState:
            if current is None or current.is_complete:
                index = 0
                remaining = steps[0].duration_seconds
            elif current.current_step_index >= len(steps):
                # Steps were removed since the last run
                index = len(steps) - 1
                remaining = steps[index].duration_seconds
            else:
                index = current.current_step_index
                step_duration = steps[index].duration_seconds
                remaining = current.current_step_remaining_seconds
                remaining = step_duration if remaining <= 0 else min(remaining, step_duration)

            return SequencePlaybackState(
                sequence_id=sequence.id,
                current_step_index=index,
                current_step_remaining_seconds=remaining,
                is_running=True,
                is_paused=False,
                is_complete=False,
            )

        state = self._store.update_entry(sequence.id, begin)
        self._launch(sequence.id)
        logger.info(
            f"Sequence {sequence.id} started at step {state.current_step_index + 1}/{len(steps)} "
            f"with {state.current_step_remaining_seconds}sec remaining"
        )
        return state

    def reset(
        self,
        sequence_id: int,
        sequence: Optional[SequenceWithSteps] = None,
    ) -> Optional[SequencePlaybackState]:
        """Return to step 0, not running. Uses the given definition or the cached steps."""
        self._loops.cancel(sequence_id)
        if sequence is not None and sequence.steps:
            self._steps[sequence_id] = tuple(sequence.sorted_steps)

        steps = self._steps.get(sequence_id)
        if not steps:
            return self._store.get(sequence_id)

        state = self._store.update_entry(
            sequence_id,
            lambda _current: SequencePlaybackState(
                sequence_id=sequence_id,
                current_step_index=0,
                current_step_remaining_seconds=steps[0].duration_seconds,
            ),
        )
        logger.info(f"Sequence {sequence_id} reset")
        return state

    def skip_next(self, sequence_id: int) -> Optional[SequencePlaybackState]:
        """Jump to the next step at its full duration. No-op on the last step."""
        return self._jump(sequence_id, 1)

    def skip_previous(self, sequence_id: int) -> Optional[SequencePlaybackState]:
        """Jump back one step at its full duration. No-op on the first step."""
        return self._jump(sequence_id, -1)

    def _jump(self, sequence_id: int, offset: int) -> Optional[SequencePlaybackState]:
        steps = self._steps.get(sequence_id)
        if not steps:
            return self._store.get(sequence_id)

        def move(current: Optional[SequencePlaybackState]) -> Optional[SequencePlaybackState]:
            if current is None or current.is_complete:
                return current
            target = current.current_step_index + offset
            if not 0 <= target < len(steps):
                return current
            return current.model_copy(update={
                "current_step_index": target,
                "current_step_remaining_seconds": steps[target].duration_seconds,
            })

        return self._store.update_entry(sequence_id, move)

    def _tick(self, sequence_id: int) -> bool:
        state = self._store.get(sequence_id)
        steps = self._steps.get(sequence_id)
        if state is None or not steps:
            return False
        if not state.is_running or state.is_complete:
            return False
        if state.is_paused:
            return True

        finished_index: Optional[int] = None
        completed = False

        def advance(current: Optional[SequencePlaybackState]) -> Optional[SequencePlaybackState]:
            nonlocal finished_index, completed
            finished_index = None
            completed = False
            if current is None or not current.is_running or current.is_paused or current.is_complete:
                return current

            remaining = current.current_step_remaining_seconds
            if remaining > 1:
                return current.model_copy(update={"current_step_remaining_seconds": remaining - 1})

            # Current step ran out
            finished_index = current.current_step_index
            next_index = finished_index + 1
            if next_index < len(steps):
                return current.model_copy(update={
                    "current_step_index": next_index,
                    "current_step_remaining_seconds": steps[next_index].duration_seconds,
                })

            completed = True
            return current.model_copy(update={
                "current_step_remaining_seconds": 0,
                "is_running": False,
                "is_paused": False,
                "is_complete": True,
            })

        written = self._store.update_entry(sequence_id, advance)
        if written is None:
            return False
        logger.debug(f"Sequence {sequence_id} tick")

        # Handlers run after the write and may change the state themselves
        if finished_index is not None and 0 <= finished_index < len(steps):
            step = steps[finished_index]
            logger.info(f"Sequence {sequence_id} step {finished_index + 1}/{len(steps)} '{step.label}' complete")
            self._bus.publish(StepCompleted(sequence_id=sequence_id, step_index=finished_index, step=step))

        if not completed:
            return True

        if self._store.get(sequence_id) is not written:
            logger.info(f"Sequence {sequence_id} changed by a step handler, completion not announced")
            return False

        logger.info(f"Sequence {sequence_id} completed")
        self._bus.publish(SequenceCompleted(sequence_id=sequence_id))
        return False

    def _forget(self, sequence_id: int) -> None:
        self._steps.pop(sequence_id, None)
