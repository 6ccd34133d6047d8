"""Timer definitions feature module"""

from sequence_timer.features.timers.api import router
from sequence_timer.features.timers.repository import TimerRepository

__all__ = ["router", "TimerRepository"]
