"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timezone
from typing import Dict, Generator, List
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from balance_gateway.api.main import create_app
from balance_gateway.config import Settings
from balance_gateway.domain.models import TransactionBucket
from balance_gateway.infrastructure.database.models import (
    Base,
    AccountRecord,
    CustomerRecord,
    TransactionBucketRecord,
)
from balance_gateway.infrastructure.database.session import Database
from fakes import make_bucket


@pytest.fixture
def sample_buckets() -> Dict[int, List[TransactionBucket]]:
    """Account 1: buy 100 / sell 50, account 2: buy 200 / sell 150"""
    return {
        1: [make_bucket(1, ("buy", 100), ("sell", 50))],
        2: [make_bucket(2, ("buy", 200), ("sell", 150))],
    }


@pytest.fixture
def database(tmp_path) -> Generator[Database, None, None]:
    """File-backed SQLite database with all tables created"""
    database = Database(f"sqlite:///{tmp_path / 'test.db'}")
    database.create_tables()
    try:
        yield database
    finally:
        Base.metadata.drop_all(bind=database.engine)
        database.dispose()


@pytest.fixture
def db(database: Database) -> Generator[Session, None, None]:
    """Session seeded with sample accounts, customers and buckets"""
    session = database.session()
    seed(session)
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(database: Database, db: Session) -> TestClient:
    """Create FastAPI test client bound to the seeded test database"""
    app = create_app(
        settings=Settings(database_url=str(database.url), log_level="WARNING"),
        database=database,
    )
    return TestClient(app)


def seed(session: Session) -> None:
    session.add_all(
        [
            AccountRecord(account_id=1, limit=10000, products=["Brokerage", "InvestmentStock"]),
            AccountRecord(account_id=2, limit=5000, products=["Commodity"]),
            AccountRecord(account_id=3, limit=10000, products=[]),
            CustomerRecord(
                username="testUser",
                name="Test User",
                address="1 Main St",
                birthdate=datetime(1990, 5, 17, tzinfo=timezone.utc),
                email="test@example.com",
                accounts=[1, 2],
                tier_and_details={
                    "tier1": {"tier": "Gold", "benefits": ["benefit1"], "active": True, "id": "1"},
                    "tier2": {"tier": "Silver", "benefits": ["benefit2"], "active": False, "id": "2"},
                },
            ),
            CustomerRecord(username="dupUser", name="Dup User", email="dup@example.com", accounts=[1, 1]),
            CustomerRecord(username="ghostUser", name="Ghost User", email="ghost@example.com", accounts=[999]),
            CustomerRecord(username="malformedUser", name="Malformed", email="m@example.com", accounts=[3]),
            TransactionBucketRecord(
                account_id=1,
                transaction_count=1,
                bucket_start_date=datetime(2023, 1, 1, tzinfo=timezone.utc),
                bucket_end_date=datetime(2023, 1, 31, tzinfo=timezone.utc),
                transactions=[
                    {"date": "2023-01-15T00:00:00+00:00", "amount": 100, "transaction_code": "buy",
                     "symbol": "aapl", "price": 150.0, "total": 15000.0},
                ],
            ),
            TransactionBucketRecord(
                account_id=1,
                transaction_count=1,
                bucket_start_date=datetime(2023, 2, 1, tzinfo=timezone.utc),
                bucket_end_date=datetime(2023, 2, 28, tzinfo=timezone.utc),
                transactions=[
                    {"date": "2023-02-20T00:00:00+00:00", "amount": 50, "transaction_code": "sell",
                     "symbol": "aapl", "price": 160.0, "total": 8000.0},
                ],
            ),
            TransactionBucketRecord(
                account_id=2,
                transaction_count=2,
                bucket_start_date=datetime(2023, 1, 1, tzinfo=timezone.utc),
                bucket_end_date=datetime(2023, 1, 31, tzinfo=timezone.utc),
                transactions=[
                    {"date": "2023-01-10T00:00:00+00:00", "amount": 200, "transaction_code": "buy",
                     "symbol": "msft", "price": 250.0, "total": 50000.0},
                    {"date": "2023-01-12T00:00:00+00:00", "amount": 150, "transaction_code": "sell",
                     "symbol": "msft", "price": 255.0, "total": 38250.0},
                ],
            ),
            TransactionBucketRecord(
                account_id=3,
                transaction_count=2,
                bucket_start_date=None,
                bucket_end_date=None,
                transactions=[
                    {"transaction_code": "sell", "symbol": "ibm"},
                    {"amount": "12", "transaction_code": "buy"},
                ],
            ),
        ]
    )
    session.commit()
