"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger.json import JsonFormatter

from financing_service.config import settings


class CustomJsonFormatter(JsonFormatter):
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


def log_schedule(request_id: str, method: str, term_months: int, total_interest: float, duration_ms: float) -> None:
    """Log a generated amortization table"""
    logging.info(
        "Schedule generated",
        extra={
            "request_id": request_id,
            "step": "schedule_complete",
            "method": method,
            "term_months": term_months,
            "total_interest": total_interest,
            "duration_ms": duration_ms,
        },
    )


def log_reconciliation(
    request_id: str,
    payment_count: int,
    paid_installments: int,
    fully_paid: bool,
    duration_ms: float,
) -> None:
    """Log a reconciled financing status"""
    logging.info(
        "Balance reconciled",
        extra={
            "request_id": request_id,
            "step": "reconciliation_complete",
            "payment_count": payment_count,
            "paid_installments": paid_installments,
            "outcome": "settled" if fully_paid else "active",
            "duration_ms": duration_ms,
        },
    )


def log_simulation(
    request_id: str,
    method: str,
    preference: str,
    interest_saved: float,
    duration_ms: float,
) -> None:
    """Log an early payment simulation outcome for analysis"""
    logging.info(
        "Early payment simulated",
        extra={
            "request_id": request_id,
            "step": "simulation_complete",
            "method": method,
            "preference": preference,
            "interest_saved": interest_saved,
            "duration_ms": duration_ms,
        },
    )
