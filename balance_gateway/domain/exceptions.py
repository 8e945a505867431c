"""Domain-specific exceptions and error kinds"""

from enum import Enum


class ErrorKind(str, Enum):
    """Failure categories reported by the aggregation engine"""

    CUSTOMER_NOT_FOUND = "customer_not_found"
    DATA_SOURCE = "data_source"
    MALFORMED_TRANSACTION = "malformed_transaction"


class DomainException(Exception):
    """Base exception for domain layer"""

    kind: ErrorKind = ErrorKind.DATA_SOURCE


class DataSourceError(DomainException):
    """Customer or transaction data could not be retrieved"""

    kind = ErrorKind.DATA_SOURCE


class AggregationError(DataSourceError):
    """Bucket retrieval failed for one of the customer's accounts"""

    def __init__(self, account_id: int, reason: str):
        self.account_id = account_id
        self.reason = reason
        super().__init__(f"Failed to fetch transaction buckets for account {account_id}: {reason}")


class AggregationTimeoutError(DataSourceError):
    """Customer lookup and bucket retrieval did not finish within the configured bound"""

    def __init__(self, username: str, timeout: float):
        self.username = username
        self.timeout = timeout
        super().__init__(f"Balance aggregation for {username!r} timed out after {timeout}s")
