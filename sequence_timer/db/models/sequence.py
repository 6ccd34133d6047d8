"""SQLAlchemy ORM models for sequences and sequence_steps tables"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from sequence_timer.db.base import Base


class Sequence(Base):
    """
    SQLAlchemy ORM model for the sequences table.
    A sequence is a group of steps that run consecutively
    (yoga flows, HIIT workouts, Pomodoro cycles).
    """
    __tablename__ = "sequences"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    category_id = Column(
        Integer,
        ForeignKey("categories.id", ondelete="SET DEFAULT"),
        default=1,
        server_default="1",
        nullable=False,
        index=True,
    )
    sort_order = Column(Integer, default=0, nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    steps = relationship(
        "SequenceStep",
        back_populates="sequence",
        cascade="all, delete-orphan",
        order_by="SequenceStep.step_order",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Sequence(id={self.id}, name='{self.name}')>"


class SequenceStep(Base):
    """
    SQLAlchemy ORM model for the sequence_steps table.
    """
    __tablename__ = "sequence_steps"

    id = Column(Integer, primary_key=True, index=True)
    sequence_id = Column(
        Integer,
        ForeignKey("sequences.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    label = Column(String, nullable=False)
    duration_seconds = Column(Integer, nullable=False)
    notification_kind = Column(String, default="sound", nullable=False)
    step_order = Column(Integer, default=0, nullable=False)

    sequence = relationship("Sequence", back_populates="steps")

    def __repr__(self) -> str:
        return f"<SequenceStep(id={self.id}, sequence_id={self.sequence_id}, label='{self.label}')>"
