"""Structured JSON logging for FlowCast hosts"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger.json import JsonFormatter

from config.settings import get_settings


class CustomJsonFormatter(JsonFormatter):
    """JSON formatter adding timestamp, level and service metadata"""

    def __init__(self, *args: Any, service_name: str = "flowcast", **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


def setup_logging(level: Optional[str] = None, stream: Any = None) -> logging.Handler:
    """Configure structured JSON logging on the root logger.

    The library never calls this on import; hosts embedding the engine opt in.
    """
    settings = get_settings()
    logger = logging.getLogger()
    logger.setLevel((level or settings.log_level).upper())

    logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s",
        service_name=settings.service_name,
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return handler
