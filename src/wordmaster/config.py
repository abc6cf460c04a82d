"""Configuration settings for the mastery scheduler."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Define base directory
BASE_DIR = Path(__file__).parent.parent.parent

# Load environment variables from .env file
env_file = ".env.test" if os.getenv("ENV") == "test" else ".env"
load_dotenv(env_file)


# Review delay per mastery level, in minutes (levels 0..5)
INTERVAL_MINUTES = (1, 10, 60, 720, 1440, 10080)
# Display-only estimate of days between reviews, indexed by mastery level
ESTIMATE_INTERVAL_DAYS = (1, 2, 4, 7, 15, 30, 60, 120)

MIN_MASTERY_LEVEL = 0
MAX_MASTERY_LEVEL = 5
MASTERED_LEVEL = 4


@dataclass
class DatabaseSettings:
    """Database configuration settings."""
    url: str = os.getenv("DATABASE_URL", "sqlite:///wordmaster.db")
    echo: bool = os.getenv("DATABASE_ECHO", "false").lower() == "true"


@dataclass
class LoggingSettings:
    """Logging configuration settings."""
    level: str = os.getenv("LOG_LEVEL", "INFO")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    dir: Optional[str] = os.getenv("LOG_DIR", None)
    rotation: str = os.getenv("LOG_ROTATION", "midnight")
    interval: int = int(os.getenv("LOG_INTERVAL", "1"))
    backup_count: int = int(os.getenv("LOG_BACKUP_COUNT", "7"))


@dataclass
class SchedulerSettings:
    """Review scheduling settings."""
    due_words_limit: int = int(os.getenv("DUE_WORDS_LIMIT", "20"))
    forecast_limit: int = int(os.getenv("FORECAST_LIMIT", "20"))
    urgent_threshold: float = float(os.getenv("URGENT_THRESHOLD", "1.5"))
    interval_minutes: tuple[int, ...] = INTERVAL_MINUTES
    estimate_interval_days: tuple[int, ...] = ESTIMATE_INTERVAL_DAYS


def get_metrics_port() -> Optional[int]:
    """Get metrics exporter port from environment variable."""
    port = os.getenv("METRICS_PORT", "")
    return int(port) if port else None


@dataclass
class MonitoringSettings:
    """Prometheus exporter settings."""
    port: Optional[int] = field(default_factory=get_metrics_port)


def get_database_settings() -> DatabaseSettings:
    """Get database settings."""
    return DatabaseSettings()


def get_logging_settings() -> LoggingSettings:
    """Get logging settings."""
    return LoggingSettings()


def get_scheduler_settings() -> SchedulerSettings:
    """Get scheduler settings."""
    return SchedulerSettings()


def get_monitoring_settings() -> MonitoringSettings:
    """Get monitoring settings."""
    return MonitoringSettings()


@dataclass
class Settings:
    """Main settings class that combines all configuration settings."""
    database: DatabaseSettings = field(default_factory=get_database_settings)
    logging: LoggingSettings = field(default_factory=get_logging_settings)
    scheduler: SchedulerSettings = field(default_factory=get_scheduler_settings)
    monitoring: MonitoringSettings = field(default_factory=get_monitoring_settings)

    def validate(self) -> None:
        """Validate settings and raise ValueError if invalid."""
        if not self.database.url:
            raise ValueError("DATABASE_URL is required")

        if self.scheduler.due_words_limit < 1:
            raise ValueError("DUE_WORDS_LIMIT must be positive")

        if self.scheduler.forecast_limit < 1:
            raise ValueError("FORECAST_LIMIT must be positive")

        if self.scheduler.urgent_threshold <= 0:
            raise ValueError("URGENT_THRESHOLD must be positive")

        if len(self.scheduler.interval_minutes) != MAX_MASTERY_LEVEL + 1:
            raise ValueError("Interval table must have one entry per mastery level")

        if any(minutes <= 0 for minutes in self.scheduler.interval_minutes):
            raise ValueError("Review intervals must be positive")

        if self.monitoring.port is not None and not 0 < self.monitoring.port < 65536:
            raise ValueError("METRICS_PORT must be a valid TCP port")


# Create global settings instance
settings = Settings()
settings.validate()
