"""
Centralized logging configuration with structured logging support.
"""
import json
import logging
import logging.config
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Generator, Optional

from tutor_analytics.core.config import settings

# Context variable carrying the caller-supplied job id of the report being
# built. Set by the report service for the duration of one build so every log
# line emitted by the pipeline (including concurrent fan-out tasks) can be
# correlated without any ambient session state.
report_job_context: ContextVar[Optional[str]] = ContextVar(
    "report_job_id", default=None
)

# Structured fields copied from ``extra=`` onto the JSON log entry
_EXTRA_FIELDS = (
    "test_id",
    "test_family",
    "teacher_id",
    "student_id",
    "duration_ms",
    "row_count",
)


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for production logging.

    Produces structured log entries with consistent fields for log aggregation.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        log_entry: Dict[str, Any] = {
            "timestamp": timestamp.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        job_id = report_job_context.get()
        if job_id:
            log_entry["job_id"] = job_id

        for field_name in _EXTRA_FIELDS:
            if hasattr(record, field_name):
                log_entry[field_name] = getattr(record, field_name)

        # Add source location for error-level logs
        if record.levelno >= logging.ERROR:
            log_entry["source"] = f"{record.pathname}:{record.lineno}"

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def setup_logging() -> None:
    """
    Configure engine-wide logging with structured output.

    Configures:
    - Log level from settings
    - JSON formatting for production (structured for log aggregators)
    - Human-readable format for development
    - Job id correlation via context variables
    """
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    is_production = settings.ENV == "production"

    logging_config: Dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {
                "()": JSONFormatter,
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": log_level,
                "formatter": "json" if is_production else "default",
                "stream": sys.stdout,
            },
        },
        "root": {
            "level": log_level,
            "handlers": ["console"],
        },
        "loggers": {
            "tutor_analytics": {
                "level": log_level,
                "handlers": ["console"],
                "propagate": False,
            },
            "asyncio": {
                "level": logging.WARNING,
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }

    logging.config.dictConfig(logging_config)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)


@contextmanager
def report_job(job_id: Optional[str]) -> Generator[None, None, None]:
    """
    Bind a job id to every log line emitted inside the block.

    Nested blocks restore the outer job id on exit. ``None`` leaves the
    current binding untouched.

    Example:
        >>> with report_job("nightly-2024-05-01"):
        ...     report = await service.build_report(test)
    """
    if job_id is None:
        yield
        return
    token = report_job_context.set(job_id)
    try:
        yield
    finally:
        report_job_context.reset(token)
