import logging
from typing import Any, Dict
from datetime import datetime, timezone
from contextvars import ContextVar
from pythonjsonlogger import jsonlogger

from perfdesk.core.config import settings

# Correlation ID of the request being served, set by CorrelationIdMiddleware
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        if not log_record.get("timestamp"):
            log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.app_name
        log_record["environment"] = settings.environment
        req_id = request_id_var.get()
        if req_id:
            log_record["request_id"] = req_id


def setup_logging():
    root = logging.getLogger()
    # The app module can be imported more than once under test
    if any(isinstance(h.formatter, CustomJsonFormatter) for h in root.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(CustomJsonFormatter("%(timestamp) %(level) %(name) %(message)"))
    root.addHandler(handler)
    root.setLevel(settings.log_level.upper())

    for noisy in ("uvicorn.access", "sqlalchemy.engine"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
