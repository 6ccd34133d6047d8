"""SQLAlchemy ORM models"""

from sequence_timer.db.models.category import Category
from sequence_timer.db.models.timer import Timer
from sequence_timer.db.models.sequence import Sequence, SequenceStep

__all__ = ["Category", "Timer", "Sequence", "SequenceStep"]
