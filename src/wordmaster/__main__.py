"""Command line entry point for wordmaster."""
import argparse
import json
import logging
import sys
from typing import List, Optional

from wordmaster.config import settings
from wordmaster.logging_config import setup_logging
from wordmaster.models.base import SessionLocal, init_db
from wordmaster.monitoring import start_monitoring
from wordmaster.services.mastery_service import MasteryService

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="wordmaster",
        description="Spaced-repetition mastery tracking for vocabulary.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    attempt = subparsers.add_parser("attempt", help="Record a quiz attempt")
    attempt.add_argument("user_id")
    attempt.add_argument("word_id")
    outcome = attempt.add_mutually_exclusive_group(required=True)
    outcome.add_argument("--correct", dest="is_correct", action="store_true")
    outcome.add_argument("--incorrect", dest="is_correct", action="store_false")

    due = subparsers.add_parser("due", help="List words due for review")
    due.add_argument("user_id")
    due.add_argument("--limit", type=int, default=None)

    forecast = subparsers.add_parser("forecast", help="Show the day-scale review forecast")
    forecast.add_argument("user_id")

    stats = subparsers.add_parser("stats", help="Show mastery statistics")
    stats.add_argument("user_id")

    return parser


def run(args: argparse.Namespace, service: MasteryService) -> object:
    """Execute a parsed command and return a JSON-serializable result."""
    if args.command == "attempt":
        return service.record_attempt(args.user_id, args.word_id, args.is_correct).to_dict()

    if args.command == "due":
        return [record.to_dict() for record in service.get_due_words(args.user_id, args.limit)]

    if args.command == "forecast":
        forecast = service.get_review_forecast(args.user_id)
        return {
            "total": forecast.total,
            "urgent": forecast.urgent,
            "words": [
                {
                    **entry.record.to_dict(),
                    "daysSinceReview": entry.days_since_review,
                    "urgency": round(entry.urgency, 2),
                }
                for entry in forecast.words
            ],
        }

    if args.command == "stats":
        stats = service.get_stats(args.user_id)
        return {
            "total": stats.total,
            "mastered": stats.mastered,
            "distribution": stats.distribution,
            "correctCount": stats.correct_count,
            "incorrectCount": stats.incorrect_count,
            "accuracy": round(stats.accuracy, 3),
            "nextReview": stats.next_review.isoformat() if stats.next_review else None,
        }

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    """Run the command line interface."""
    args = build_parser().parse_args(argv)

    setup_logging("Starting wordmaster ...")

    if settings.monitoring.port is not None:
        start_monitoring(settings.monitoring.port)
        logger.info(f"Metrics exported on port {settings.monitoring.port}")

    init_db()
    db = SessionLocal()
    try:
        result = run(args, MasteryService(db))
    finally:
        db.close()

    print(json.dumps(result, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
