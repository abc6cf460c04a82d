"""Test configuration."""
import os
from datetime import datetime, UTC
from typing import Generator

import pytest

# Set test environment before any imports
os.environ["ENV"] = "test"
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

# Import after environment setup
from faker import Faker
from sqlalchemy.orm import Session

from wordmaster.models.base import Base, SessionLocal, engine, init_db
from wordmaster.services.mastery_service import MasteryService

fake = Faker()


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    init_db()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def mastery_service(db: Session) -> MasteryService:
    """Create a mastery service instance."""
    return MasteryService(db)


@pytest.fixture
def now() -> datetime:
    """Fixed reference time for scheduling tests."""
    return datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def user_id() -> str:
    """Random user identifier."""
    return fake.uuid4()
