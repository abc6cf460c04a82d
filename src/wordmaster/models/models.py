"""Database models for wordmaster."""
from sqlalchemy import (
    Column,
    DateTime,
    Index,
    Integer,
    String,
    UniqueConstraint,
)

from wordmaster.models.base import Base, TimestampMixin


class WordMastery(Base, TimestampMixin):
    """Per-user, per-word mastery record."""

    __tablename__ = "word_mastery"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, nullable=False)
    word_id = Column(String, nullable=False)
    mastery_level = Column(Integer, nullable=False, default=0)  # 0-5
    correct_count = Column(Integer, nullable=False, default=0)
    incorrect_count = Column(Integer, nullable=False, default=0)
    last_reviewed = Column(DateTime(timezone=True), nullable=False)
    next_review = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "word_id", name="uq_user_word"),
        Index("idx_user_next_review", "user_id", "next_review"),
    )

    def __repr__(self):
        return (
            f"<WordMastery user_id={self.user_id} word_id={self.word_id} "
            f"level={self.mastery_level}>"
        )
