"""Unit tests for the balance aggregation engine"""

import asyncio
import pytest

from balance_gateway.domain.aggregation import BalanceAggregator
from balance_gateway.domain.exceptions import (
    AggregationError,
    AggregationTimeoutError,
    DataSourceError,
    ErrorKind,
)
from balance_gateway.domain.models import AccountBalance
from fakes import InMemoryBucketSource, InMemoryCustomerDirectory, make_bucket, make_customer


def build_aggregator(customers, source, timeout=None) -> BalanceAggregator:
    directory = InMemoryCustomerDirectory({c.username: c for c in customers})
    return BalanceAggregator(directory, source, timeout=timeout)


async def test_aggregate_two_accounts(sample_buckets):
    """Accounts [1, 2] -> [-50, -50]"""
    source = InMemoryBucketSource(sample_buckets)
    aggregator = build_aggregator([make_customer("user1", [1, 2])], source)

    balances = await aggregator.aggregate("user1")

    assert balances == [AccountBalance(1, -50), AccountBalance(2, -50)]
    assert sorted(source.calls) == [1, 2]


async def test_aggregate_keeps_duplicate_accounts(sample_buckets):
    """Accounts [1, 1] -> two entries, one fetch each"""
    source = InMemoryBucketSource(sample_buckets)
    aggregator = build_aggregator([make_customer("user1", [1, 1])], source)

    balances = await aggregator.aggregate("user1")

    assert balances == [AccountBalance(1, -50), AccountBalance(1, -50)]
    assert source.calls == [1, 1]


async def test_aggregate_unknown_customer_returns_empty(sample_buckets):
    source = InMemoryBucketSource(sample_buckets)
    aggregator = build_aggregator([], source)

    assert await aggregator.aggregate("nobody") == []
    assert source.calls == []


async def test_aggregate_customer_without_accounts():
    source = InMemoryBucketSource({})
    aggregator = build_aggregator([make_customer("user1", [])], source)

    assert await aggregator.aggregate("user1") == []


async def test_aggregate_missing_account_has_zero_balance(sample_buckets):
    source = InMemoryBucketSource(sample_buckets)
    aggregator = build_aggregator([make_customer("user1", [999, 1])], source)

    balances = await aggregator.aggregate("user1")

    assert balances == [AccountBalance(999, 0), AccountBalance(1, -50)]


async def test_aggregate_order_follows_accounts_not_completion(sample_buckets):
    """First account finishes last but stays first in the output"""
    source = InMemoryBucketSource(sample_buckets, delays={1: 0.05, 2: 0.0})
    aggregator = build_aggregator([make_customer("user1", [1, 2])], source)

    balances = await aggregator.aggregate("user1")

    assert source.completed == [2, 1]
    assert [b.account_id for b in balances] == [1, 2]


async def test_aggregate_fetches_concurrently(sample_buckets):
    """Three 0.1s fetches finish well under their sequential total"""
    source = InMemoryBucketSource(sample_buckets, delays={1: 0.1, 2: 0.1, 3: 0.1})
    aggregator = build_aggregator([make_customer("user1", [1, 2, 3])], source)

    loop = asyncio.get_running_loop()
    start = loop.time()
    await aggregator.aggregate("user1")

    assert loop.time() - start < 0.25


async def test_aggregate_is_idempotent(sample_buckets):
    source = InMemoryBucketSource(sample_buckets)
    aggregator = build_aggregator([make_customer("user1", [2, 1, 2])], source)

    first = await aggregator.aggregate("user1")
    second = await aggregator.aggregate("user1")

    assert first == second


async def test_aggregate_fetch_failure_fails_whole_call(sample_buckets):
    source = InMemoryBucketSource(sample_buckets, failures={2: ConnectionError("connection reset")})
    aggregator = build_aggregator([make_customer("user1", [1, 2])], source)

    with pytest.raises(AggregationError) as exc_info:
        await aggregator.aggregate("user1")

    assert exc_info.value.account_id == 2
    assert "connection reset" in str(exc_info.value)
    assert exc_info.value.kind is ErrorKind.DATA_SOURCE
    assert isinstance(exc_info.value.__cause__, ConnectionError)


async def test_aggregate_failure_cancels_pending_fetches(sample_buckets):
    source = InMemoryBucketSource(
        sample_buckets,
        delays={1: 10.0},
        failures={2: RuntimeError("boom")},
    )
    aggregator = build_aggregator([make_customer("user1", [1, 2])], source)

    with pytest.raises(AggregationError):
        await aggregator.aggregate("user1")

    await asyncio.sleep(0.01)
    assert source.cancelled == [1]


async def test_aggregate_timeout(sample_buckets):
    source = InMemoryBucketSource(sample_buckets, delays={1: 10.0})
    aggregator = build_aggregator([make_customer("user1", [1, 2])], source, timeout=0.05)

    with pytest.raises(AggregationTimeoutError) as exc_info:
        await aggregator.aggregate("user1")

    assert isinstance(exc_info.value, DataSourceError)
    assert exc_info.value.timeout == 0.05

    await asyncio.sleep(0.01)
    assert 1 in source.cancelled


async def test_aggregate_timeout_covers_customer_lookup(sample_buckets):
    customer = make_customer("user1", [1, 2])
    directory = InMemoryCustomerDirectory({"user1": customer}, delay=1.0)
    source = InMemoryBucketSource(sample_buckets)
    aggregator = BalanceAggregator(directory, source, timeout=0.05)

    loop = asyncio.get_running_loop()
    started = loop.time()
    with pytest.raises(AggregationTimeoutError) as exc_info:
        await aggregator.aggregate("user1")

    assert loop.time() - started < 0.5
    assert exc_info.value.username == "user1"
    assert source.calls == []


async def test_aggregate_none_buckets_is_data_source_failure():
    class NoneSource(InMemoryBucketSource):
        async def fetch(self, account_id):
            return None

    aggregator = build_aggregator([make_customer("user1", [5])], NoneSource({}))

    with pytest.raises(AggregationError) as exc_info:
        await aggregator.aggregate("user1")

    assert exc_info.value.account_id == 5


async def test_aggregate_lookup_failure_is_data_source_error(sample_buckets):
    directory = InMemoryCustomerDirectory({}, error=OSError("directory offline"))
    aggregator = BalanceAggregator(directory, InMemoryBucketSource(sample_buckets))

    with pytest.raises(DataSourceError) as exc_info:
        await aggregator.aggregate("user1")

    assert not isinstance(exc_info.value, AggregationError)
    assert "directory offline" in str(exc_info.value)


async def test_aggregate_malformed_transactions_degrade():
    source = InMemoryBucketSource({3: [make_bucket(3, ("sell", None), (None, 20), ("buy", 5))]})
    aggregator = build_aggregator([make_customer("user1", [3])], source)

    balances = await aggregator.aggregate("user1")

    assert balances == [AccountBalance(3, 15)]
