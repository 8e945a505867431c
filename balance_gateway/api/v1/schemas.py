"""Pydantic schemas for API responses

Dates are written as integer epoch milliseconds, the format existing
dashboard clients parse.
"""

from datetime import datetime
from typing import Annotated, Any, List, Optional, Union
from pydantic import BaseModel, BeforeValidator, ConfigDict

from balance_gateway.domain.models import Customer
from balance_gateway.utils.date_utils import to_epoch_millis


def _epoch_millis(value: Any) -> Any:
    if isinstance(value, datetime):
        return to_epoch_millis(value)
    return value


EpochMillis = Annotated[Optional[int], BeforeValidator(_epoch_millis)]


class AccountSchema(BaseModel):
    """Single brokerage account"""

    model_config = ConfigDict(from_attributes=True)

    account_id: int
    limit: int
    products: List[str]


class TierDetailsSchema(BaseModel):
    """Customer tier entry"""

    model_config = ConfigDict(from_attributes=True)

    tier: str
    benefits: List[str]
    active: bool
    id: str


class CustomerSchema(BaseModel):
    """Customer profile; tier_and_details is flattened to a list"""

    model_config = ConfigDict(from_attributes=True)

    username: str
    name: str
    address: str
    birthdate: EpochMillis = None
    email: str
    accounts: List[int]
    tier_and_details: List[TierDetailsSchema]

    @classmethod
    def from_domain(cls, customer: Customer) -> "CustomerSchema":
        return cls(
            username=customer.username,
            name=customer.name,
            address=customer.address,
            birthdate=customer.birthdate,
            email=customer.email,
            accounts=customer.accounts,
            tier_and_details=[TierDetailsSchema.model_validate(t) for t in customer.tiers()],
        )


class TransactionSchema(BaseModel):
    """Single transaction inside a bucket"""

    model_config = ConfigDict(from_attributes=True)

    date: EpochMillis = None
    amount: Optional[Union[int, float]] = None
    transaction_code: Optional[str] = None
    symbol: Optional[str] = None
    price: Optional[float] = None
    total: Optional[float] = None


class TransactionBucketSchema(BaseModel):
    """Transactions for one account within a date window"""

    model_config = ConfigDict(from_attributes=True)

    account_id: int
    transaction_count: int
    bucket_start_date: EpochMillis = None
    bucket_end_date: EpochMillis = None
    transactions: List[TransactionSchema]


class AccountBalanceSchema(BaseModel):
    """Net balance of one account"""

    model_config = ConfigDict(from_attributes=True)

    account_id: int
    balance: float
