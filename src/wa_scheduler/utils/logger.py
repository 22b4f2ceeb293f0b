"""
Logging Utilities

Provides structured logging for the message scheduler.

- Structured JSON logging when JSON_LOGGING=true
- Coloured console logging otherwise
- Per-module loggers
"""

import asyncio
import os
import sys
import json
import logging
from datetime import datetime, timezone
from typing import Optional
from functools import wraps
from dotenv import load_dotenv

load_dotenv()

# Log level from environment
LOG_LEVEL = os.getenv("LOG_LEVEL", "info").upper()

# Whether to use JSON format
JSON_LOGGING = os.getenv("JSON_LOGGING", "false").lower() == "true"


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ConsoleFormatter(logging.Formatter):
    """Console formatter with colors and structure."""

    COLORS = {
        "DEBUG": "\033[36m",    # Cyan
        "INFO": "\033[32m",     # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",    # Red
        "CRITICAL": "\033[35m", # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, "")
        reset = self.RESET if color else ""

        timestamp = datetime.now().strftime("%H:%M:%S")

        msg = f"{color}[{timestamp}] [{record.levelname:7}]{reset} [{record.name}] {record.getMessage()}"

        if hasattr(record, "extra_fields") and record.extra_fields:
            extras = " ".join(f"{k}={v}" for k, v in record.extra_fields.items())
            msg += f" ({extras})"

        if record.exc_info:
            msg += "\n" + self.formatException(record.exc_info)

        return msg


def setup_logging(level: Optional[str] = None, json_logging: Optional[bool] = None) -> None:
    """
    Set up logging for the application.

    Args:
        level: Log level (debug, info, warning, error). Uses LOG_LEVEL env if not provided.
        json_logging: Force JSON output on or off. Uses JSON_LOGGING env if not provided.
    """
    log_level = getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO)
    use_json = JSON_LOGGING if json_logging is None else json_logging

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)

    if use_json:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(ConsoleFormatter())

    root_logger.addHandler(handler)

    # Set level for third-party loggers
    logging.getLogger("apscheduler").setLevel(logging.WARNING)
    logging.getLogger("tzlocal").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a module.

    Args:
        name: Module name (usually __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def log_session_transition(
    logger: logging.Logger,
    session_id: int,
    old_status: str,
    new_status: str,
    target_instant: Optional[datetime] = None,
) -> None:
    """
    Log a countdown session state change with structured data.

    Args:
        logger: Logger instance
        session_id: Session sequence number
        old_status: Status before the transition
        new_status: Status after the transition
        target_instant: Target the session was counting down to
    """
    extra_fields = {
        "session": session_id,
        "from": old_status,
        "to": new_status,
    }

    if target_instant is not None:
        extra_fields["target"] = target_instant.isoformat()

    logger.info(f"Session {session_id} {old_status} -> {new_status}", extra={"extra_fields": extra_fields})


def log_dispatch(
    logger: logging.Logger,
    recipient: str,
    target: str,
    opened: bool,
    permission: Optional[str] = None,
    error: Optional[str] = None,
) -> None:
    """
    Log a dispatch attempt with structured data.

    Args:
        logger: Logger instance
        recipient: Phone number the message is addressed to
        target: External app address that was built
        opened: Whether the external app accepted the hand-off
        permission: Result of the notification permission request
        error: Error message (if failed)
    """
    extra_fields = {
        "recipient": recipient,
        "target": target,
        "opened": opened,
    }

    if permission:
        extra_fields["permission"] = permission

    if error:
        extra_fields["error"] = error
        logger.error("Dispatch failed", extra={"extra_fields": extra_fields})
    else:
        logger.info("Dispatch handed off", extra={"extra_fields": extra_fields})


def with_logging(logger: logging.Logger):
    """
    Decorator that logs function entry and exit.

    Usage:
        @with_logging(logger)
        async def my_function(arg1, arg2):
            ...
    """
    def decorator(func):
        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            func_name = func.__name__
            logger.debug(f"Entering {func_name}")

            try:
                result = await func(*args, **kwargs)
                logger.debug(f"Exiting {func_name}")
                return result
            except Exception as e:
                logger.exception(f"Error in {func_name}: {e}")
                raise

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            func_name = func.__name__
            logger.debug(f"Entering {func_name}")

            try:
                result = func(*args, **kwargs)
                logger.debug(f"Exiting {func_name}")
                return result
            except Exception as e:
                logger.exception(f"Error in {func_name}: {e}")
                raise

        if asyncio.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator
