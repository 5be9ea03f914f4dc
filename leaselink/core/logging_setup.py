from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone

from leaselink.core.request_context import current_request_context

_SENSITIVE_PATTERNS = [
    re.compile(r"(authorization\s*[:=]\s*bearer\s+)([^\s\"]+)", re.IGNORECASE),
    re.compile(r"(\"(?:password|token|secret)\"\s*:\s*\")([^\"]*)", re.IGNORECASE),
    re.compile(r"((?:token|password|secret)\s*[:=]\s*)([^\s\",;}]+)", re.IGNORECASE),
]

# Request attributes passed through ``extra=`` by the HTTP middleware.
_REQUEST_FIELDS = ("endpoint", "method", "status_code", "duration_ms")

_QUIET_LOGGERS = ("sqlalchemy.engine", "python_multipart")


def mask_secrets(value: str) -> str:
    for pattern in _SENSITIVE_PATTERNS:
        value = pattern.sub(r"\1***", value)
    return value


class RequestContextFilter(logging.Filter):
    """Copies the bound request id / user id onto records that lack them."""

    def filter(self, record: logging.LogRecord) -> bool:
        context = current_request_context()
        if getattr(record, "request_id", None) is None:
            record.request_id = context.request_id
        if getattr(record, "user_id", None) is None:
            record.user_id = context.user_id
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.name,
            "request_id": getattr(record, "request_id", None),
            "user_id": getattr(record, "user_id", None),
            "message": mask_secrets(record.getMessage()),
        }
        payload.update(
            {key: getattr(record, key) for key in _REQUEST_FIELDS if getattr(record, key, None) is not None}
        )
        if record.exc_info:
            payload["exc_info"] = mask_secrets(self.formatException(record.exc_info))
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(level: str = "INFO") -> None:
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)

    handler = logging.StreamHandler()
    handler.addFilter(RequestContextFilter())
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)

    for logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(logger_name).setLevel(level)
    for logger_name in _QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)
