"""SQLAlchemy ORM model for categories table"""

from sqlalchemy import BigInteger, Boolean, Column, Integer, String

from sequence_timer.db.base import Base


class Category(Base):
    """
    SQLAlchemy ORM model for the categories table.
    Groups timers and sequences in the library.
    """
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    icon = Column(String, nullable=True)
    color = Column(BigInteger, nullable=True)
    sort_order = Column(Integer, default=0, nullable=False)
    is_default = Column(Boolean, default=False, nullable=False)

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name='{self.name}')>"
