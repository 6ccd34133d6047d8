"""Playback API endpoints"""

import logging
from typing import AsyncIterator, Optional
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from sequence_timer.features.playback.definitions import RepositoryDefinitionSource
from sequence_timer.features.playback.schemas import (
    ClearResponse,
    OngoingSummaryResponse,
    SequencePlaybackView,
    SequenceStatesResponse,
    TimerPlaybackView,
    TimerStatesResponse,
)
from sequence_timer.features.playback.service import PlaybackService

logger = logging.getLogger(__name__)


router = APIRouter(prefix="/api/playback", tags=["playback"])


def get_playback_service(request: Request) -> PlaybackService:
    """Build the service around the process-wide engines stored on app.state"""
    state = request.app.state
    return PlaybackService(
        timer_engine=state.timer_engine,
        sequence_engine=state.sequence_engine,
        definitions=RepositoryDefinitionSource(state.session_factory),
    )


async def _event_stream(states: AsyncIterator[Optional[BaseModel]]) -> AsyncIterator[str]:
    """Render a state stream as server-sent events"""
    try:
        async for state in states:
            payload = state.model_dump_json() if state is not None else "null"
            yield f"data: {payload}\n\n"
    finally:
        await states.aclose()


def _sse_response(states: AsyncIterator[Optional[BaseModel]]) -> StreamingResponse:
    return StreamingResponse(
        _event_stream(states),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
        },
    )


async def _run(operation) -> BaseModel:
    try:
        return await operation
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/summary", response_model=OngoingSummaryResponse)
async def get_summary(service: PlaybackService = Depends(get_playback_service)):
    """Ongoing-notification text and whether anything is running"""
    return service.summary()


# ---- Timers ----

@router.get("/timers", response_model=TimerStatesResponse)
async def list_timer_states(service: PlaybackService = Depends(get_playback_service)):
    """All live timer states keyed by timer ID"""
    return service.timer_states()


@router.get("/timers/{timer_id}", response_model=TimerPlaybackView)
async def get_timer_playback(timer_id: int, service: PlaybackService = Depends(get_playback_service)):
    """
    Get a timer with its playback state.

    Initializes idle state at full duration on first access.
    """
    return await _run(service.get_timer(timer_id))


@router.post("/timers/{timer_id}/start", response_model=TimerPlaybackView)
async def start_timer(timer_id: int, service: PlaybackService = Depends(get_playback_service)):
    """Start a timer, or resume it from its remaining time after stop"""
    return await _run(service.start_timer(timer_id))


@router.post("/timers/{timer_id}/pause", response_model=TimerPlaybackView)
async def pause_timer(timer_id: int, service: PlaybackService = Depends(get_playback_service)):
    return await _run(service.pause_timer(timer_id))


@router.post("/timers/{timer_id}/resume", response_model=TimerPlaybackView)
async def resume_timer(timer_id: int, service: PlaybackService = Depends(get_playback_service)):
    return await _run(service.resume_timer(timer_id))


@router.post("/timers/{timer_id}/reset", response_model=TimerPlaybackView)
async def reset_timer(timer_id: int, service: PlaybackService = Depends(get_playback_service)):
    return await _run(service.reset_timer(timer_id))


@router.post("/timers/{timer_id}/stop", response_model=TimerPlaybackView)
async def stop_timer(timer_id: int, service: PlaybackService = Depends(get_playback_service)):
    """Stop a timer and keep its remaining time"""
    return await _run(service.stop_timer(timer_id))


@router.delete("/timers/{timer_id}", response_model=ClearResponse)
async def clear_timer(timer_id: int, service: PlaybackService = Depends(get_playback_service)):
    """Drop all playback state for a timer"""
    service.clear_timer(timer_id)
    return {"success": True, "message": f"Timer {timer_id} playback cleared"}


@router.get("/timers/{timer_id}/stream")
async def stream_timer(timer_id: int, request: Request):
    """Server-sent events with the timer's state on every change"""
    return _sse_response(request.app.state.timer_engine.state_stream(timer_id))


# ---- Sequences ----

@router.get("/sequences", response_model=SequenceStatesResponse)
async def list_sequence_states(service: PlaybackService = Depends(get_playback_service)):
    """All live sequence states keyed by sequence ID"""
    return service.sequence_states()


@router.get("/sequences/{sequence_id}", response_model=SequencePlaybackView)
async def get_sequence_playback(sequence_id: int, service: PlaybackService = Depends(get_playback_service)):
    """
    Get a sequence with its playback state, current/next step and progress.

    Initializes idle state at the first step on first access.
    """
    return await _run(service.get_sequence(sequence_id))


@router.post("/sequences/{sequence_id}/start", response_model=SequencePlaybackView)
async def start_sequence(sequence_id: int, service: PlaybackService = Depends(get_playback_service)):
    """Start or resume a sequence. A sequence without steps is left untouched."""
    return await _run(service.start_sequence(sequence_id))


@router.post("/sequences/{sequence_id}/pause", response_model=SequencePlaybackView)
async def pause_sequence(sequence_id: int, service: PlaybackService = Depends(get_playback_service)):
    return await _run(service.pause_sequence(sequence_id))


@router.post("/sequences/{sequence_id}/resume", response_model=SequencePlaybackView)
async def resume_sequence(sequence_id: int, service: PlaybackService = Depends(get_playback_service)):
    return await _run(service.resume_sequence(sequence_id))


@router.post("/sequences/{sequence_id}/reset", response_model=SequencePlaybackView)
async def reset_sequence(sequence_id: int, service: PlaybackService = Depends(get_playback_service)):
    return await _run(service.reset_sequence(sequence_id))


@router.post("/sequences/{sequence_id}/stop", response_model=SequencePlaybackView)
async def stop_sequence(sequence_id: int, service: PlaybackService = Depends(get_playback_service)):
    return await _run(service.stop_sequence(sequence_id))


@router.post("/sequences/{sequence_id}/skip-next", response_model=SequencePlaybackView)
async def skip_next_step(sequence_id: int, service: PlaybackService = Depends(get_playback_service)):
    """Jump to the next step at its full duration"""
    return await _run(service.skip_next(sequence_id))


@router.post("/sequences/{sequence_id}/skip-previous", response_model=SequencePlaybackView)
async def skip_previous_step(sequence_id: int, service: PlaybackService = Depends(get_playback_service)):
    """Jump back one step at its full duration"""
    return await _run(service.skip_previous(sequence_id))


@router.delete("/sequences/{sequence_id}", response_model=ClearResponse)
async def clear_sequence(sequence_id: int, service: PlaybackService = Depends(get_playback_service)):
    """Drop all playback state for a sequence"""
    service.clear_sequence(sequence_id)
    return {"success": True, "message": f"Sequence {sequence_id} playback cleared"}


@router.get("/sequences/{sequence_id}/stream")
async def stream_sequence(sequence_id: int, request: Request):
    """Server-sent events with the sequence's state on every change"""
    return _sse_response(request.app.state.sequence_engine.state_stream(sequence_id))
