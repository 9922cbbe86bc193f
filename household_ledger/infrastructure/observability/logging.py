"""Structured JSON logging for dashboard computations"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from household_ledger.config import settings


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

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_dashboard(
    month: str,
    card_count: int,
    transaction_count: int,
    current_month_billing: int,
    duration_ms: float,
) -> None:
    """Log structured dashboard outcome for analysis"""
    logging.getLogger("household_ledger.dashboard").info(
        "Dashboard computed",
        extra={
            "month": month,
            "step": "dashboard_complete",
            "card_count": card_count,
            "transaction_count": transaction_count,
            "current_month_billing": current_month_billing,
            "duration_ms": duration_ms,
        },
    )
