import logging
import sys
from datetime import datetime, UTC
from logging.handlers import RotatingFileHandler
from typing import Any, Dict
from uuid import uuid4
from pythonjsonlogger.jsonlogger import JsonFormatter
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from app.core.config import settings
import time
import traceback

NAMED_LOGGERS = [
    "api.request",
    "api.assignments",
    "api.templates",
    "api.team",
    "db",
    "uvicorn",
]

class CustomJsonFormatter(JsonFormatter):
    """Custom JSON formatter for logs."""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        """Add custom fields to the log record."""
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.now(UTC).isoformat()
        log_record["level"] = record.levelname
        log_record["name"] = record.name

        # Code location
        log_record["function"] = record.funcName
        log_record["module"] = record.module
        log_record["line"] = record.lineno

        log_record["process_id"] = record.process
        log_record["thread_id"] = record.thread
        log_record["environment"] = settings.ENVIRONMENT

        # Request context, when the caller attached it
        if hasattr(record, "request_id"):
            log_record["request_id"] = record.request_id
        if hasattr(record, "user_id"):
            log_record["user_id"] = record.user_id
        if hasattr(record, "duration"):
            log_record["duration"] = record.duration

def _build_handler() -> logging.Handler:
    if settings.ENVIRONMENT.lower() == "development":
        handler: logging.Handler = logging.StreamHandler(sys.stdout)
    else:
        handler = RotatingFileHandler(
            filename=settings.LOG_FILE_PATH,
            maxBytes=10_000_000,
            backupCount=3
        )
    handler.setFormatter(CustomJsonFormatter())
    return handler

def setup_logging() -> None:
    """Configure logging for the application."""
    handler = _build_handler()

    root_logger = logging.getLogger()
    root_logger.setLevel(settings.LOG_LEVEL.upper())

    # Remove default handlers
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    for logger_name in NAMED_LOGGERS:
        logger = logging.getLogger(logger_name)
        logger.setLevel(settings.LOG_LEVEL.upper())
        logger.propagate = True

def setup_test_logging() -> None:
    """Configure logging for tests so caplog sees every named logger."""
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)

    for logger_name in NAMED_LOGGERS:
        logger = logging.getLogger(logger_name)
        logger.setLevel(logging.INFO)
        logger.propagate = True

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging HTTP requests."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = str(uuid4())
        start_time = time.time()
        request.state.request_id = request_id

        extra = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "duration": None
        }

        request_logger.info("Incoming request", extra=extra)

        try:
            response = await call_next(request)
        except Exception as e:
            extra["duration"] = time.time() - start_time
            extra["error"] = str(e)
            extra["error_type"] = e.__class__.__name__
            extra["traceback"] = traceback.format_exc()

            request_logger.error(f"{e.__class__.__name__} occurred", extra=extra)
            raise

        extra["duration"] = time.time() - start_time
        extra["status_code"] = response.status_code
        request_logger.info("Request completed", extra=extra)

        response.headers["X-Request-ID"] = request_id
        return response

# Named loggers
request_logger = logging.getLogger("api.request")
assignments_logger = logging.getLogger("api.assignments")
templates_logger = logging.getLogger("api.templates")
team_logger = logging.getLogger("api.team")
db_logger = logging.getLogger("db")
