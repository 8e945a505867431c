"""Data-access contracts consumed by the aggregation engine"""

from abc import ABC, abstractmethod
from typing import List, Optional
from balance_gateway.domain.models import Customer, TransactionBucket


class CustomerDirectory(ABC):
    """Resolves a customer record by username"""

    @abstractmethod
    async def lookup(self, username: str) -> Optional[Customer]:
        """Return the customer, or None when no customer has this username"""
        raise NotImplementedError


class TransactionBucketSource(ABC):
    """Provides the transaction buckets stored for an account"""

    @abstractmethod
    async def fetch(self, account_id: int) -> List[TransactionBucket]:
        """Return all buckets for the account (an empty list when there are none)"""
        raise NotImplementedError
