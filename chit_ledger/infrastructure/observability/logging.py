"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def __init__(self, *args, service_name: str = "chit-ledger", **kwargs):
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


def setup_logging(level: str = "INFO", service_name: str = "chit-ledger") -> None:
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


def log_payment_preview(
    request_id: str,
    fund_id: str,
    member_id: str,
    kind: str,
    is_valid: bool,
    duration_ms: float,
) -> None:
    """Log structured payment preview outcome"""
    logging.info(
        "Payment preview completed",
        extra={
            "request_id": request_id,
            "fund_id": fund_id,
            "member_id": member_id,
            "step": "payment_preview",
            "classification": kind,
            "valid": is_valid,
            "duration_ms": duration_ms,
        },
    )


def log_cycles_generated(
    request_id: str,
    fund_id: str,
    interval_type: str,
    cycle_count: int,
    duration_ms: float,
) -> None:
    """Log structured cycle generation outcome"""
    logging.info(
        "Cycles generated",
        extra={
            "request_id": request_id,
            "fund_id": fund_id,
            "step": "cycles_generated",
            "interval_type": interval_type,
            "cycle_count": cycle_count,
            "duration_ms": duration_ms,
        },
    )
