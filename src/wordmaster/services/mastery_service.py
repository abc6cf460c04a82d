"""Mastery service for recording quiz attempts and querying due words."""
import logging
from datetime import datetime, UTC
from typing import List, Optional

from sqlalchemy import and_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wordmaster import monitoring
from wordmaster.config import settings
from wordmaster.models.mastery_models import (
    MasteryRecord,
    MasteryStats,
    ReviewForecast,
    as_utc,
)
from wordmaster.models.models import WordMastery
from wordmaster.services import mastery_scheduler

logger = logging.getLogger(__name__)


def to_record(row: WordMastery) -> MasteryRecord:
    """Convert a database row into a mastery record."""
    return MasteryRecord(
        word_id=row.word_id,
        mastery_level=row.mastery_level,
        correct_count=row.correct_count,
        incorrect_count=row.incorrect_count,
        last_reviewed=as_utc(row.last_reviewed),
        next_review=as_utc(row.next_review),
    )


class MasteryService:
    """Service for persisting mastery records of a user's words."""

    def __init__(self, db: Session):
        """Initialize the service with a database session."""
        self.db = db

    def _get_row(self, user_id: str, word_id: str) -> Optional[WordMastery]:
        return (
            self.db.query(WordMastery)
            .filter(
                and_(
                    WordMastery.user_id == user_id,
                    WordMastery.word_id == word_id,
                )
            )
            .first()
        )

    def get_record(self, user_id: str, word_id: str) -> Optional[MasteryRecord]:
        """Get the mastery record of a word, or None if never attempted."""
        row = self._get_row(user_id, word_id)
        return to_record(row) if row else None

    def get_records(self, user_id: str) -> List[MasteryRecord]:
        """Get all mastery records of a user."""
        rows = (
            self.db.query(WordMastery)
            .filter(WordMastery.user_id == user_id)
            .order_by(WordMastery.word_id)
            .all()
        )
        return [to_record(row) for row in rows]

    def record_attempt(
        self,
        user_id: str,
        word_id: str,
        is_correct: bool,
        now: Optional[datetime] = None,
    ) -> MasteryRecord:
        """Apply a quiz attempt to the stored record and persist the result."""
        if not user_id:
            raise ValueError("user_id is required")
        if not word_id:
            raise ValueError("word_id is required")
        now = as_utc(now) if now is not None else datetime.now(UTC)

        try:
            row = self._get_row(user_id, word_id)
            current = to_record(row) if row else None
            updated = mastery_scheduler.record_attempt(current, is_correct, now, word_id=word_id)

            if row is None:
                row = WordMastery(user_id=user_id, word_id=word_id)
                self.db.add(row)
                operation = "insert"
            else:
                operation = "update"

            row.mastery_level = updated.mastery_level
            row.correct_count = updated.correct_count
            row.incorrect_count = updated.incorrect_count
            row.last_reviewed = updated.last_reviewed
            row.next_review = updated.next_review
            self.db.commit()
            monitoring.db_operations.labels(operation_type=operation).inc()
            if operation == "insert":
                monitoring.records_created.inc()
        except SQLAlchemyError as e:
            self.db.rollback()
            monitoring.db_errors.labels(error_type=type(e).__name__).inc()
            logger.error(f"Failed to record attempt for user {user_id}, word {word_id}: {e}")
            raise

        monitoring.attempts_recorded.labels(outcome="correct" if is_correct else "incorrect").inc()
        logger.info(
            f"User {user_id} word {word_id}: "
            f"{'correct' if is_correct else 'incorrect'}, "
            f"level {current.mastery_level if current else 0} -> {updated.mastery_level}, "
            f"next review {updated.next_review.isoformat()}"
        )
        return updated

    def get_due_words(
        self,
        user_id: str,
        limit: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> List[MasteryRecord]:
        """Get words due for review, most overdue first."""
        if limit is None:
            limit = settings.scheduler.due_words_limit
        now = as_utc(now) if now is not None else datetime.now(UTC)

        due = list(mastery_scheduler.select_due_words(self.get_records(user_id), now, limit))
        monitoring.due_word_queries.inc()
        monitoring.due_words_returned.observe(len(due))
        logger.info(f"Due words for user {user_id}: {len(due)}")
        return due

    def get_review_forecast(
        self,
        user_id: str,
        now: Optional[datetime] = None,
    ) -> ReviewForecast:
        """Get the day-scale review forecast of a user's words."""
        now = as_utc(now) if now is not None else datetime.now(UTC)
        return mastery_scheduler.review_forecast(
            self.get_records(user_id),
            now,
            limit=settings.scheduler.forecast_limit,
            urgent_threshold=settings.scheduler.urgent_threshold,
        )

    def get_stats(self, user_id: str) -> MasteryStats:
        """Get mastery statistics of a user's words."""
        return mastery_scheduler.mastery_stats(self.get_records(user_id))
