"""Sequence definitions feature module"""

from sequence_timer.features.sequences.api import router
from sequence_timer.features.sequences.repository import SequenceRepository

__all__ = ["router", "SequenceRepository"]
