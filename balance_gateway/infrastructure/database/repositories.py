"""Data access layer for accounts, customers and transaction buckets"""

from typing import Any, Dict, List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from balance_gateway.infrastructure.database.models import AccountRecord, CustomerRecord, TransactionBucketRecord
from balance_gateway.domain.models import Account, Customer, TierDetails, Transaction, TransactionBucket
from balance_gateway.domain.exceptions import DataSourceError
from balance_gateway.utils.date_utils import parse_stored_datetime


def _as_number(value: Any) -> Optional[float]:
    """Numeric field or None (bools and strings are not amounts)"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def transaction_from_document(doc: Dict[str, Any]) -> Transaction:
    """Build a Transaction from an embedded document, degrading bad fields to None"""
    return Transaction(
        date=parse_stored_datetime(doc.get("date")),
        amount=_as_number(doc.get("amount")),
        transaction_code=_as_str(doc.get("transaction_code")),
        symbol=_as_str(doc.get("symbol")),
        price=_as_number(doc.get("price")),
        total=_as_number(doc.get("total")),
    )


def bucket_from_record(record: TransactionBucketRecord) -> TransactionBucket:
    transactions = [
        transaction_from_document(doc) for doc in (record.transactions or []) if isinstance(doc, dict)
    ]
    return TransactionBucket(
        account_id=record.account_id,
        transaction_count=record.transaction_count or 0,
        bucket_start_date=parse_stored_datetime(record.bucket_start_date),
        bucket_end_date=parse_stored_datetime(record.bucket_end_date),
        transactions=transactions,
    )


def account_from_record(record: AccountRecord) -> Account:
    return Account(
        account_id=record.account_id,
        limit=record.limit or 0,
        products=list(record.products or []),
    )


def _as_account_id(value: Any) -> Optional[int]:
    """Integer account reference or None (digit strings are accepted)"""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdecimal():
        return int(value)
    return None


def tier_from_document(doc: Dict[str, Any]) -> TierDetails:
    benefits = doc.get("benefits")
    return TierDetails(
        tier=_as_str(doc.get("tier")) or "",
        benefits=[b for b in benefits if isinstance(b, str)] if isinstance(benefits, list) else [],
        active=doc.get("active") is True,
        id=str(doc.get("id") or ""),
    )


def customer_from_record(record: CustomerRecord) -> Customer:
    """Build a Customer, skipping account references and tiers that cannot be read"""
    raw_tiers = record.tier_and_details if isinstance(record.tier_and_details, dict) else {}
    tiers = {
        str(key): tier_from_document(details) for key, details in raw_tiers.items() if isinstance(details, dict)
    }
    raw_accounts = record.accounts if isinstance(record.accounts, list) else []
    accounts = [_as_account_id(value) for value in raw_accounts]
    return Customer(
        username=record.username,
        name=record.name or "",
        address=record.address or "",
        birthdate=parse_stored_datetime(record.birthdate),
        email=record.email or "",
        accounts=[account_id for account_id in accounts if account_id is not None],
        tier_and_details=tiers,
    )


class AccountRepository:
    """Repository for accounts"""

    def __init__(self, db: Session):
        self.db = db

    def list_accounts(self) -> List[Account]:
        try:
            records = self.db.query(AccountRecord).order_by(AccountRecord.account_id).all()
        except SQLAlchemyError as e:
            raise DataSourceError(f"Failed to load accounts: {e}") from e
        return [account_from_record(r) for r in records]

    def get_account(self, account_id: int) -> Optional[Account]:
        """Fetch a single account, None when it does not exist"""
        try:
            record = self.db.query(AccountRecord).filter(AccountRecord.account_id == account_id).first()
        except SQLAlchemyError as e:
            raise DataSourceError(f"Failed to load account {account_id}: {e}") from e
        return account_from_record(record) if record else None


class CustomerRepository:
    """Repository for customers"""

    def __init__(self, db: Session):
        self.db = db

    def list_customers(self) -> List[Customer]:
        try:
            records = self.db.query(CustomerRecord).order_by(CustomerRecord.id).all()
        except SQLAlchemyError as e:
            raise DataSourceError(f"Failed to load customers: {e}") from e
        return [customer_from_record(r) for r in records]

    def get_by_username(self, username: str) -> Optional[Customer]:
        """Fetch a customer by its unique username"""
        try:
            record = self.db.query(CustomerRecord).filter(CustomerRecord.username == username).first()
        except SQLAlchemyError as e:
            raise DataSourceError(f"Failed to load customer {username!r}: {e}") from e
        return customer_from_record(record) if record else None


class TransactionBucketRepository:
    """Repository for transaction buckets"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_account_id(self, account_id: int) -> List[TransactionBucket]:
        """All buckets stored for an account, oldest window first"""
        try:
            records = (
                self.db.query(TransactionBucketRecord)
                .filter(TransactionBucketRecord.account_id == account_id)
                .order_by(TransactionBucketRecord.bucket_start_date, TransactionBucketRecord.id)
                .all()
            )
        except SQLAlchemyError as e:
            raise DataSourceError(f"Failed to load transaction buckets for account {account_id}: {e}") from e
        return [bucket_from_record(r) for r in records]
