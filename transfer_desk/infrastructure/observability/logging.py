"""Structured JSON logging for the client core"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from transfer_desk.config import settings


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


def log_sync_cycle(session_id: str, cycle: int, outcome: str, duration_ms: float) -> None:
    """Log one sync cycle result"""
    logging.info(
        "Sync cycle finished",
        extra={
            "session_id": session_id,
            "step": "sync_cycle",
            "cycle": cycle,
            "outcome": outcome,
            "duration_ms": duration_ms,
        },
    )


def log_transfer(session_id: str, outcome: str, amount: str, warning: str | None, duration_ms: float) -> None:
    """Log structured transfer outcome for analysis"""
    logging.info(
        "Transfer completed",
        extra={
            "session_id": session_id,
            "step": "transfer_complete",
            "transfer_outcome": outcome,
            "amount": amount,
            "warning": warning,
            "duration_ms": duration_ms,
        },
    )


def log_session_event(session_id: str, event: str, **fields: Any) -> None:
    """Log a session lifecycle transition"""
    logging.info(
        f"Session {event}",
        extra={"session_id": session_id, "step": f"session_{event}", **fields},
    )
