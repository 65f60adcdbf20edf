"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict
from pythonjsonlogger import jsonlogger
from ledger_desk.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_ledger_summary(
    request_id: str,
    user_id: int,
    window: str,
    entry_count: int,
    income: Decimal,
    expense: Decimal,
    duration_ms: float,
) -> None:
    """Log a computed ledger summary"""
    logging.info(
        "Ledger summary computed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "ledger_summary",
            "window": window,
            "entry_count": entry_count,
            "income": str(income),
            "expense": str(expense),
            "duration_ms": duration_ms,
        },
    )


def log_invoice_rendered(
    request_id: str,
    user_id: int,
    invoice_id: str,
    kind: str,
    size_bytes: int,
    duration_ms: float,
) -> None:
    """Log a successfully rendered invoice document"""
    logging.info(
        "Invoice rendered",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "invoice_render",
            "invoice_id": invoice_id,
            "invoice_kind": kind,
            "size_bytes": size_bytes,
            "duration_ms": duration_ms,
        },
    )
