"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from welile_hub.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Adds timestamp, level and service name to every record"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Route the root logger to stdout as one JSON object per line"""
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))
    root.addHandler(handler)


def log_calculation(request_id: str, step: str, duration_ms: float, **fields: Any) -> None:
    """Log structured outcome of a quote or portfolio computation"""
    logging.info(
        "Calculation completed",
        extra={"request_id": request_id, "step": step, "duration_ms": round(duration_ms, 3), **fields},
    )


def log_rejection(request_id: str, step: str, reason: str, detail: str) -> None:
    """Log a request refused by domain validation"""
    logging.warning(
        "Calculation rejected",
        extra={"request_id": request_id, "step": step, "reason": reason, "detail": detail},
    )
