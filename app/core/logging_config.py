"""
Structured logging configuration for the application.

Every record carries the request it was logged under: the HTTP method and
path set by `RequestContextMiddleware`, and the authenticated user id once
the access guard has verified a token. Outside a request both are "-".
"""

import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

NO_CONTEXT = "-"

request_method_var: ContextVar[str] = ContextVar("request_method", default=NO_CONTEXT)
request_path_var: ContextVar[str] = ContextVar("request_path", default=NO_CONTEXT)
user_id_var: ContextVar[str] = ContextVar("user_id", default=NO_CONTEXT)


def bind_user(user_id: Optional[Any]) -> None:
    """Attach the authenticated user to every log record for the rest of the request."""
    user_id_var.set(str(user_id) if user_id is not None else NO_CONTEXT)


class RequestContextFilter(logging.Filter):
    """Copies the current request context onto each log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_method = request_method_var.get()
        record.request_path = request_path_var.get()
        record.user_id = user_id_var.get()
        return True


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter with timestamp, level, source and request context fields.
    """

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record['timestamp'] = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat().replace('+00:00', 'Z')
        log_record['level'] = record.levelname
        log_record['logger'] = record.name

        # Request context (filled in by RequestContextFilter)
        log_record['method'] = getattr(record, 'request_method', NO_CONTEXT)
        log_record['path'] = getattr(record, 'request_path', NO_CONTEXT)
        log_record['user_id'] = getattr(record, 'user_id', NO_CONTEXT)

        # Source location only matters for problems
        if record.levelno >= logging.WARNING:
            log_record['module'] = record.module
            log_record['line'] = record.lineno


def build_formatter(json_logs: bool) -> logging.Formatter:
    if json_logs:
        return CustomJsonFormatter('%(timestamp)s %(level)s %(logger)s %(message)s')
    return logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - [%(request_method)s %(request_path)s user=%(user_id)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def setup_logging(log_level: str = "INFO", json_logs: bool = True) -> None:
    """
    Configure logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: JSON output for production, human-readable lines for development
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.addFilter(RequestContextFilter())
    console_handler.setFormatter(build_formatter(json_logs))

    root_logger.setLevel(getattr(logging, log_level.upper()))
    root_logger.addHandler(console_handler)

    # SQL echo and bcrypt backend warnings are noise at INFO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)
