"""Balance reduction - turns transaction history into a signed net balance"""

from typing import Iterable, Iterator
from balance_gateway.domain.models import AccountBalance, Transaction, TransactionBucket

BUY_CODE = "buy"


def transaction_contribution(transaction: Transaction) -> float:
    """
    Signed contribution of a single transaction.

    Rules:
    - Missing amount counts as 0
    - "buy" debits the account (negative)
    - Every other code credits it, including "sell", unknown and missing codes
    """
    amount = transaction.amount if transaction.amount is not None else 0
    if transaction.transaction_code == BUY_CODE:
        return -amount
    return amount


def reduce_transactions(transactions: Iterable[Transaction]) -> float:
    """Sum transaction contributions into a net balance (0 for no transactions)"""
    balance = 0
    for transaction in transactions:
        balance += transaction_contribution(transaction)
    return balance


def flatten_buckets(buckets: Iterable[TransactionBucket]) -> Iterator[Transaction]:
    """Yield every transaction across all buckets of an account"""
    for bucket in buckets:
        yield from bucket.transactions


def compute_account_balance(account_id: int, buckets: Iterable[TransactionBucket]) -> AccountBalance:
    """Reduce all buckets of an account into its AccountBalance"""
    return AccountBalance(
        account_id=account_id,
        balance=reduce_transactions(flatten_buckets(buckets)),
    )
