"""SQLAlchemy ORM models for the analytics collections"""

from sqlalchemy import Column, String, BigInteger, DateTime, Integer, Text, JSON
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class AccountRecord(Base):
    """Brokerage account"""

    __tablename__ = "accounts"

    account_id = Column(BigInteger, primary_key=True, autoincrement=False)
    limit = Column(Integer, nullable=False, default=0)
    products = Column(JSON, nullable=False, default=list)


class CustomerRecord(Base):
    """Customer profile with the ids of its accounts"""

    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(Text, nullable=False, default="")
    address = Column(Text, nullable=False, default="")
    birthdate = Column(DateTime(timezone=True), nullable=True)
    email = Column(Text, nullable=False, default="")
    accounts = Column(JSON, nullable=False, default=list)  # ordered list of account ids
    tier_and_details = Column(JSON, nullable=False, default=dict)  # tier key -> details


class TransactionBucketRecord(Base):
    """Time-windowed bucket of embedded transaction documents"""

    __tablename__ = "transaction_buckets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(BigInteger, nullable=False, index=True)
    transaction_count = Column(Integer, nullable=False, default=0)
    bucket_start_date = Column(DateTime(timezone=True), nullable=True)
    bucket_end_date = Column(DateTime(timezone=True), nullable=True)
    transactions = Column(JSON, nullable=False, default=list)
