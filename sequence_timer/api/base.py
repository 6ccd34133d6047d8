from fastapi import APIRouter
from sequence_timer.api import health
from sequence_timer.features import categories, playback, sequences, timers

api_router = APIRouter()

# Include all sub-routers
api_router.include_router(health.router)
api_router.include_router(categories.router)
api_router.include_router(timers.router)
api_router.include_router(sequences.router)
api_router.include_router(playback.router)
