"""Spaced-repetition scheduling of word mastery.

Mastery is an integer level from 0 (never answered correctly) to 5 (fully
retained). Every attempt moves the level by exactly one step, up on a correct
answer and down on an incorrect one, and the next review is scheduled from the
post-update level using ``INTERVAL_MINUTES``.

A second, day-scale table (``ESTIMATE_INTERVAL_DAYS``) feeds the urgency score
and the review forecast. Those are display estimates only; whether a word is
due is decided by ``next_review`` alone.

All functions here are pure: they take records and a ``now`` timestamp and
return new values without touching storage.
"""
import heapq
import logging
import math
from collections.abc import Collection
from datetime import UTC, datetime, timedelta
from typing import Iterable, Iterator, Optional

from wordmaster.config import (
    ESTIMATE_INTERVAL_DAYS,
    INTERVAL_MINUTES,
    MASTERED_LEVEL,
    MAX_MASTERY_LEVEL,
    MIN_MASTERY_LEVEL,
)
from wordmaster.models.mastery_models import (
    ForecastEntry,
    MasteryRecord,
    MasteryStats,
    ReviewForecast,
    as_utc,
)

logger = logging.getLogger(__name__)

DEFAULT_DUE_LIMIT = 20
DEFAULT_FORECAST_LIMIT = 20
DEFAULT_URGENT_THRESHOLD = 1.5

SECONDS_PER_DAY = 24 * 60 * 60


def clamp_level(level: int) -> int:
    """Clamp a mastery level into the valid range."""
    if level < MIN_MASTERY_LEVEL or level > MAX_MASTERY_LEVEL:
        logger.warning(f"Mastery level {level} out of range, clamping")
    return max(MIN_MASTERY_LEVEL, min(MAX_MASTERY_LEVEL, level))


def _clamp_count(count: int, name: str) -> int:
    if count < 0:
        logger.warning(f"Negative {name} {count}, clamping to 0")
        return 0
    return count


def review_delay(level: int) -> timedelta:
    """Get the delay until the next review for a mastery level."""
    return timedelta(minutes=INTERVAL_MINUTES[clamp_level(level)])


def estimate_interval_days(level: int) -> int:
    """Get the display-only estimate of days between reviews for a level."""
    index = min(max(level, 0), len(ESTIMATE_INTERVAL_DAYS) - 1)
    return ESTIMATE_INTERVAL_DAYS[index]


def new_record(word_id: str, now: Optional[datetime] = None) -> MasteryRecord:
    """Create a level-0 record that has not been reviewed yet."""
    timestamp = as_utc(now) if now is not None else datetime.now(UTC)
    return MasteryRecord(
        word_id=word_id,
        mastery_level=MIN_MASTERY_LEVEL,
        correct_count=0,
        incorrect_count=0,
        last_reviewed=timestamp,
        next_review=timestamp,
    )


def record_attempt(
    record: Optional[MasteryRecord],
    is_correct: bool,
    now: datetime,
    word_id: Optional[str] = None,
) -> MasteryRecord:
    """Apply one quiz attempt to a mastery record.

    Args:
        record: Current record, or None if the word was never attempted.
        is_correct: Whether the answer was correct.
        now: Time of the attempt.
        word_id: Word identifier, required when ``record`` is None.

    Returns:
        A new record; the input record is never modified.
    """
    if record is None:
        if not word_id:
            raise ValueError("word_id is required for a first attempt")
        record = new_record(word_id, now)
    elif word_id is not None and word_id != record.word_id:
        raise ValueError(f"Record is for word {record.word_id}, not {word_id}")

    level = clamp_level(record.mastery_level)
    correct_count = _clamp_count(record.correct_count, "correct_count")
    incorrect_count = _clamp_count(record.incorrect_count, "incorrect_count")

    if is_correct:
        level = min(MAX_MASTERY_LEVEL, level + 1)
        correct_count += 1
    else:
        level = max(MIN_MASTERY_LEVEL, level - 1)
        incorrect_count += 1

    reviewed_at = as_utc(now)
    return MasteryRecord(
        word_id=record.word_id,
        mastery_level=level,
        correct_count=correct_count,
        incorrect_count=incorrect_count,
        last_reviewed=reviewed_at,
        next_review=reviewed_at + review_delay(level),
    )


def is_due(record: Optional[MasteryRecord], now: datetime) -> bool:
    """Check whether a word should be reviewed at ``now``."""
    if record is None:
        return False
    return as_utc(now) >= as_utc(record.next_review)


def _due_order(record: MasteryRecord):
    return as_utc(record.next_review), record.word_id


class DueWords:
    """Words due for review, oldest ``next_review`` first.

    Filtering and sorting run on each iteration, so the selection can be
    iterated any number of times and reflects the current records.
    """

    def __init__(self, records: Iterable[MasteryRecord], now: datetime, limit: int):
        if not isinstance(records, Collection):
            records = tuple(records)
        self.records = records
        self.now = as_utc(now)
        self.limit = limit

    def __iter__(self) -> Iterator[MasteryRecord]:
        if self.limit <= 0:
            return iter(())
        due = (record for record in self.records if is_due(record, self.now))
        return iter(heapq.nsmallest(self.limit, due, key=_due_order))

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __repr__(self):
        return f"<DueWords now={self.now.isoformat()} limit={self.limit}>"


def select_due_words(
    records: Iterable[MasteryRecord],
    now: datetime,
    limit: int = DEFAULT_DUE_LIMIT,
) -> DueWords:
    """Select words due for review, most overdue first, at most ``limit``."""
    return DueWords(records, now, limit)


def days_since_review(record: MasteryRecord, now: datetime) -> float:
    """Get fractional days elapsed since the last review."""
    elapsed = as_utc(now) - as_utc(record.last_reviewed)
    return elapsed.total_seconds() / SECONDS_PER_DAY


def urgency(record: MasteryRecord, now: datetime) -> float:
    """Score how overdue a word looks on the day-scale estimate.

    Used for presentation ordering only, never for ``is_due``.
    """
    return days_since_review(record, now) / estimate_interval_days(record.mastery_level)


def review_forecast(
    records: Iterable[MasteryRecord],
    now: datetime,
    limit: int = DEFAULT_FORECAST_LIMIT,
    urgent_threshold: float = DEFAULT_URGENT_THRESHOLD,
) -> ReviewForecast:
    """Summarize words whose day-scale estimate has elapsed, most urgent first.

    Words at the top mastery level are left out.
    """
    entries = []
    for record in records:
        if record.mastery_level >= MAX_MASTERY_LEVEL:
            continue
        days = days_since_review(record, now)
        expected = estimate_interval_days(record.mastery_level)
        if days >= expected:
            entries.append(ForecastEntry(
                record=record,
                days_since_review=math.floor(days),
                urgency=days / expected,
            ))

    entries.sort(key=lambda entry: (-entry.urgency, entry.record.word_id))
    return ReviewForecast(
        total=len(entries),
        urgent=sum(1 for entry in entries if entry.urgency > urgent_threshold),
        words=entries[:max(limit, 0)],
    )


def mastery_stats(records: Iterable[MasteryRecord]) -> MasteryStats:
    """Aggregate level distribution and answer accuracy."""
    distribution = {level: 0 for level in range(MIN_MASTERY_LEVEL, MAX_MASTERY_LEVEL + 1)}
    correct = incorrect = 0
    next_review: Optional[datetime] = None
    for record in records:
        distribution[clamp_level(record.mastery_level)] += 1
        correct += max(record.correct_count, 0)
        incorrect += max(record.incorrect_count, 0)
        candidate = as_utc(record.next_review)
        if next_review is None or candidate < next_review:
            next_review = candidate

    total = sum(distribution.values())
    attempts = correct + incorrect
    return MasteryStats(
        total=total,
        mastered=sum(count for level, count in distribution.items() if level >= MASTERED_LEVEL),
        distribution=distribution,
        correct_count=correct,
        incorrect_count=incorrect,
        accuracy=correct / attempts if attempts else 0.0,
        next_review=next_review,
    )
