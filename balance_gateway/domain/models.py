"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional


@dataclass(frozen=True)
class Account:
    """Brokerage account with its credit limit and product tags"""

    account_id: int
    limit: int
    products: List[str] = field(default_factory=list)


@dataclass
class TierDetails:
    """Loyalty tier entry attached to a customer"""

    tier: str
    benefits: List[str]
    active: bool
    id: str


@dataclass
class Customer:
    """Customer profile and the accounts it owns"""

    username: str
    name: str
    address: str
    birthdate: Optional[datetime]
    email: str
    accounts: List[int] = field(default_factory=list)
    tier_and_details: Dict[str, TierDetails] = field(default_factory=dict)

    def tiers(self) -> List[TierDetails]:
        """Tier entries in stored order, without their keys"""
        return list(self.tier_and_details.values())


@dataclass
class Transaction:
    """Single trade inside a transaction bucket"""

    date: Optional[datetime] = None
    amount: Optional[float] = None  # magnitude, sign comes from transaction_code
    transaction_code: Optional[str] = None  # "buy" or "sell"
    symbol: Optional[str] = None
    price: Optional[float] = None
    total: Optional[float] = None

    @property
    def is_malformed(self) -> bool:
        return self.amount is None or self.transaction_code is None


@dataclass
class TransactionBucket:
    """Time-windowed group of transactions for one account"""

    account_id: int
    transaction_count: int
    bucket_start_date: Optional[datetime]
    bucket_end_date: Optional[datetime]
    transactions: List[Transaction] = field(default_factory=list)


@dataclass(frozen=True)
class AccountBalance:
    """Net signed balance computed for one account"""

    account_id: int
    balance: float
