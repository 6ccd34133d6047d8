"""SQLAlchemy ORM model for timers table"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.sql import func

from sequence_timer.db.base import Base


class Timer(Base):
    """
    SQLAlchemy ORM model for the timers table.
    """
    __tablename__ = "timers"

    # Primary key
    id = Column(Integer, primary_key=True, index=True)

    # Timer definition
    label = Column(String, nullable=False)
    duration_seconds = Column(Integer, nullable=False)
    notification_kind = Column(String, default="sound", nullable=False)

    # Relationships
    category_id = Column(
        Integer,
        ForeignKey("categories.id", ondelete="SET DEFAULT"),
        default=1,
        server_default="1",
        nullable=False,
        index=True,
    )

    # Ordering
    sort_order = Column(Integer, default=0, nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    def __repr__(self) -> str:
        return f"<Timer(id={self.id}, label='{self.label}', duration_seconds={self.duration_seconds})>"
