"""
Logging setup for Employee Portal.

Production writes one JSON object per line; development writes colored
single-line records. Any record emitted while a request is being served is
stamped with that request's id (see core/middleware.py).
"""

import json
import logging
import sys
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Optional

from employee_portal.core.config import settings

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# Keys present on every LogRecord; anything else arrived through `extra=`
_STANDARD_RECORD_KEYS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "request_id"}

_NOISY_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "aiosqlite", "httpx", "httpcore")


def generate_request_id() -> str:
    return uuid.uuid4().hex[:12]


class RequestIdFilter(logging.Filter):
    """Attach the current request id (or None) to each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_var.get()
        return True


class JSONFormatter(logging.Formatter):
    def __init__(self, service_name: str = "employee-portal"):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
            "env": settings.ENVIRONMENT,
            "request_id": getattr(record, "request_id", None),
            "where": f"{record.module}:{record.funcName}:{record.lineno}",
        }

        if record.exc_info and record.exc_info[0] is not None:
            payload["error"] = {
                "type": record.exc_info[0].__name__,
                "detail": str(record.exc_info[1]),
                "stack": self.formatException(record.exc_info),
            }

        extra = {k: v for k, v in vars(record).items() if k not in _STANDARD_RECORD_KEYS}
        if extra:
            payload["extra"] = extra

        return json.dumps(payload, default=str)


class ColoredFormatter(logging.Formatter):
    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[1;31m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelname, "")
        request_id = getattr(record, "request_id", None)
        line = (
            f"{self.formatTime(record, '%H:%M:%S')} "
            f"{color}{record.levelname:<8}{self.RESET} "
            f"{record.name}: "
            f"{f'[{request_id}] ' if request_id else ''}"
            f"{record.getMessage()}"
        )
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(
    service_name: str = "employee-portal",
    log_level: Optional[str] = None,
    json_logs: Optional[bool] = None,
) -> None:
    """
    Route all logging to stdout with the formatter for this environment.

    Args:
        service_name: Value of the "service" field in JSON records
        log_level: Overrides LOG_LEVEL / the DEBUG-derived default
        json_logs: Overrides the production-means-JSON default
    """
    level_name = (log_level or settings.LOG_LEVEL or ("DEBUG" if settings.DEBUG else "INFO")).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {level_name}")
    use_json = settings.IS_PRODUCTION if json_logs is None else json_logs

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIdFilter())
    handler.setFormatter(JSONFormatter(service_name) if use_json else ColoredFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger("employee_portal.logging").debug(
        f"Logging ready (level={level_name}, json={use_json}, env={settings.ENVIRONMENT})"
    )
