"""Health check and monitoring endpoints"""

from fastapi import APIRouter, Request
from sequence_timer.db.session import get_pool_stats

router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("/pool")
async def get_pool_health(request: Request):
    """Connection pool statistics of the definition store"""
    return get_pool_stats(request.app.state.db_engine)


@router.get("/")
async def health_check(request: Request):
    """Basic health check endpoint with live playback counts"""
    timer_engine = request.app.state.timer_engine
    sequence_engine = request.app.state.sequence_engine
    return {
        "status": "healthy",
        "service": "sequence-timer",
        "timers": {
            "tracked": len(timer_engine.all_states()),
            "running": len(timer_engine.running_ids()),
        },
        "sequences": {
            "tracked": len(sequence_engine.all_states()),
            "running": len(sequence_engine.running_ids()),
        },
    }
