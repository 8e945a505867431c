"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def __init__(self, *args, service_name: str = "balance-gateway", **kwargs):
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


def setup_logging(level: str = "INFO", service_name: str = "balance-gateway") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s",
        service_name=service_name,
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_balance_aggregation(
    request_id: str,
    username: str,
    account_count: int,
    outcome: str,
    duration_ms: float,
    error_kind: Optional[str] = None,
    detail: Optional[str] = None,
) -> None:
    """Log structured aggregation outcome for analysis"""
    extra = {
        "request_id": request_id,
        "username": username,
        "step": "balance_aggregation_complete",
        "outcome": outcome,
        "account_count": account_count,
        "duration_ms": duration_ms,
    }
    if error_kind:
        extra["error_kind"] = error_kind
    if detail:
        extra["detail"] = detail

    if outcome in ("success", "empty"):
        logging.info("Balance aggregation completed", extra=extra)
    else:
        logging.error("Balance aggregation failed", extra=extra)
