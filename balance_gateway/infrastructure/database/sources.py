"""SQL-backed implementations of the aggregation data-access ports"""

import asyncio
import logging
from typing import List, Optional

from balance_gateway.domain.models import Customer, TransactionBucket
from balance_gateway.domain.ports import CustomerDirectory, TransactionBucketSource
from balance_gateway.domain.exceptions import DataSourceError, ErrorKind
from balance_gateway.infrastructure.database.repositories import CustomerRepository, TransactionBucketRepository
from balance_gateway.infrastructure.database.session import Database
from balance_gateway.infrastructure.observability.metrics import (
    bucket_fetch_failures_counter,
    bucket_fetch_latency_histogram,
    malformed_transactions_counter,
)

logger = logging.getLogger(__name__)


class SqlCustomerDirectory(CustomerDirectory):
    """Customer lookups against the customers table"""

    def __init__(self, database: Database):
        self.database = database

    async def lookup(self, username: str) -> Optional[Customer]:
        return await asyncio.to_thread(self._lookup, username)

    def _lookup(self, username: str) -> Optional[Customer]:
        # One session per call; connections come from the engine pool
        with self.database.session() as db:
            return CustomerRepository(db).get_by_username(username)


class SqlTransactionBucketSource(TransactionBucketSource):
    """Bucket retrieval against the transaction_buckets table"""

    def __init__(self, database: Database):
        self.database = database

    async def fetch(self, account_id: int) -> List[TransactionBucket]:
        try:
            with bucket_fetch_latency_histogram.time():
                buckets = await asyncio.to_thread(self._fetch, account_id)
        except DataSourceError:
            bucket_fetch_failures_counter.inc()
            raise

        malformed = sum(1 for bucket in buckets for txn in bucket.transactions if txn.is_malformed)
        if malformed:
            malformed_transactions_counter.inc(malformed)
            logger.debug(
                "Malformed transactions counted as zero or credit",
                extra={
                    "account_id": account_id,
                    "malformed_count": malformed,
                    "error_kind": ErrorKind.MALFORMED_TRANSACTION.value,
                },
            )
        return buckets

    def _fetch(self, account_id: int) -> List[TransactionBucket]:
        with self.database.session() as db:
            return TransactionBucketRepository(db).get_by_account_id(account_id)
