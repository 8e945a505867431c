"""Balance aggregation engine - per-customer fan-out over account transaction buckets"""

import asyncio
import logging
from typing import List

from balance_gateway.domain.balances import compute_account_balance
from balance_gateway.domain.exceptions import (
    AggregationError,
    AggregationTimeoutError,
    DataSourceError,
    ErrorKind,
)
from balance_gateway.domain.models import AccountBalance
from balance_gateway.domain.ports import CustomerDirectory, TransactionBucketSource

logger = logging.getLogger(__name__)


class BalanceAggregator:
    """Computes one net balance per account listed on a customer"""

    def __init__(
        self,
        directory: CustomerDirectory,
        bucket_source: TransactionBucketSource,
        timeout: float | None = None,
    ):
        self.directory = directory
        self.bucket_source = bucket_source
        self.timeout = timeout

    async def aggregate(self, username: str) -> List[AccountBalance]:
        """
        Resolve the customer and compute a balance for each of its accounts.

        Flow:
        1. Look up the customer (unknown username -> empty list)
        2. Fetch buckets for every listed account concurrently
        3. Reduce each account's transactions into a balance

        Result order and length follow customer.accounts exactly, duplicates
        included. Any failed fetch fails the whole call.

        Raises:
            DataSourceError: Customer lookup failed
            AggregationError: Bucket retrieval failed for an account
            AggregationTimeoutError: Lookup and retrieval together exceeded the timeout
        """
        try:
            return await asyncio.wait_for(self._aggregate(username), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise AggregationTimeoutError(username, self.timeout) from e

    async def _aggregate(self, username: str) -> List[AccountBalance]:
        try:
            customer = await self.directory.lookup(username)
        except DataSourceError:
            raise
        except Exception as e:
            raise DataSourceError(f"Customer lookup failed for {username!r}: {e}") from e

        if customer is None:
            logger.info(
                "Customer not found",
                extra={"username": username, "error_kind": ErrorKind.CUSTOMER_NOT_FOUND.value},
            )
            return []

        tasks = [asyncio.ensure_future(self._account_balance(account_id)) for account_id in customer.accounts]
        if not tasks:
            return []

        try:
            return list(await asyncio.gather(*tasks))
        finally:
            # gather leaves siblings running when one task fails
            for task in tasks:
                if not task.done():
                    task.cancel()

    async def _account_balance(self, account_id: int) -> AccountBalance:
        try:
            buckets = await self.bucket_source.fetch(account_id)
        except Exception as e:
            raise AggregationError(account_id, str(e) or type(e).__name__) from e

        if buckets is None:
            raise AggregationError(account_id, "bucket source returned None")

        return compute_account_balance(account_id, buckets)
