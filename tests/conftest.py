"""Pytest fixtures for testing"""

import pytest
from datetime import date
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from cardtempo.api.main import create_app
from cardtempo.infrastructure.database.models import Base
from cardtempo.infrastructure.database.session import get_db
from cardtempo.domain.models import CreditCard


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def today() -> date:
    """Fixed reference date so plans are reproducible"""
    return date(2025, 1, 10)


@pytest.fixture
def sample_cards() -> list[CreditCard]:
    """Three-card portfolio: 50% used, 80% used and an unused card"""
    return [
        CreditCard(
            id="sapphire",
            nickname="Sapphire",
            credit_limit=10_000,
            current_balance=5_000,
            statement_date=25,
            due_date=20,
            apr=24.0,
        ),
        CreditCard(
            id="freedom",
            nickname="Freedom",
            credit_limit=5_000,
            current_balance=4_000,
            statement_date=15,
            due_date=10,
            apr=29.99,
        ),
        CreditCard(
            id="discover",
            nickname="Discover It",
            credit_limit=2_000,
            current_balance=0,
            statement_date=5,
            due_date=1,
            apr=18.0,
        ),
    ]
