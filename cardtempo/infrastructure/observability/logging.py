"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def __init__(self, *args: Any, service_name: str = "cardtempo", **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


def setup_logging(level: str = "INFO", service_name: str = "cardtempo") -> None:
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


def log_optimization(
    request_id: str,
    card_count: int,
    target_utilization: float,
    current_utilization: float,
    optimized_utilization: float,
    duration_ms: float,
) -> None:
    """Log structured optimization outcome for analysis"""
    logging.info(
        "Optimization completed",
        extra={
            "request_id": request_id,
            "step": "optimization_complete",
            "card_count": card_count,
            "target_utilization": target_utilization,
            "current_utilization": round(current_utilization, 2),
            "optimized_utilization": round(optimized_utilization, 2),
            "duration_ms": duration_ms,
        },
    )
