"""Models for mastery-related data structures."""
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Dict, List, Optional


def as_utc(value: datetime) -> datetime:
    """Return a timezone-aware UTC datetime, treating naive values as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp (a trailing 'Z' is accepted)."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return as_utc(datetime.fromisoformat(value))


@dataclass(frozen=True)
class MasteryRecord:
    """Mastery state of one word for one user."""
    word_id: str
    mastery_level: int
    correct_count: int
    incorrect_count: int
    last_reviewed: datetime
    next_review: datetime

    @property
    def total_attempts(self) -> int:
        return self.correct_count + self.incorrect_count

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the persisted record shape."""
        return {
            "wordId": self.word_id,
            "masteryLevel": self.mastery_level,
            "correctCount": self.correct_count,
            "incorrectCount": self.incorrect_count,
            "lastReviewed": as_utc(self.last_reviewed).isoformat(),
            "nextReview": as_utc(self.next_review).isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MasteryRecord":
        """Build a record from the persisted record shape."""
        return cls(
            word_id=str(data["wordId"]),
            mastery_level=int(data["masteryLevel"]),
            correct_count=int(data["correctCount"]),
            incorrect_count=int(data["incorrectCount"]),
            last_reviewed=parse_timestamp(data["lastReviewed"]),
            next_review=parse_timestamp(data["nextReview"]),
        )


@dataclass(frozen=True)
class ForecastEntry:
    """A word flagged by the day-scale review estimate."""
    record: MasteryRecord
    days_since_review: int
    urgency: float


@dataclass(frozen=True)
class ReviewForecast:
    """Display-only summary of words that look overdue on the day scale."""
    total: int
    urgent: int
    words: List[ForecastEntry] = field(default_factory=list)


@dataclass(frozen=True)
class MasteryStats:
    """Aggregate statistics over a user's mastery records."""
    total: int
    mastered: int
    distribution: Dict[int, int]
    correct_count: int
    incorrect_count: int
    accuracy: float
    next_review: Optional[datetime] = None
