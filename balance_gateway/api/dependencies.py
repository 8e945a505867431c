"""Dependency injection for FastAPI endpoints"""

from typing import Generator
from fastapi import Request
from sqlalchemy.orm import Session

from balance_gateway.domain.aggregation import BalanceAggregator
from balance_gateway.infrastructure.database.session import Database, session_scope
from balance_gateway.infrastructure.database.sources import SqlCustomerDirectory, SqlTransactionBucketSource


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_database(request: Request) -> Database:
    """Database owned by the running application"""
    return request.app.state.database


def get_db(request: Request) -> Generator[Session, None, None]:
    """Per-request database session"""
    yield from session_scope(get_database(request))


def get_balance_aggregator(request: Request) -> BalanceAggregator:
    """Provide an aggregator wired to the SQL data sources"""
    database = get_database(request)
    return BalanceAggregator(
        directory=SqlCustomerDirectory(database),
        bucket_source=SqlTransactionBucketSource(database),
        timeout=request.app.state.settings.aggregation_timeout_seconds,
    )
