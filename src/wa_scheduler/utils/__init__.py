"""
Utilities Module

Common utilities for the message scheduler.
"""

from .logger import (
    setup_logging,
    get_logger,
    log_session_transition,
    log_dispatch,
    with_logging,
)

from .errors import (
    SchedulerError,
    ValidationError,
    AlertArmingError,
    PermissionDeniedError,
    UnreachableTargetError,
    ConfigError,
    Outcome,
    capture_outcome,
    format_error_for_user,
    format_error_for_log,
)

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "log_session_transition",
    "log_dispatch",
    "with_logging",
    # Errors
    "SchedulerError",
    "ValidationError",
    "AlertArmingError",
    "PermissionDeniedError",
    "UnreachableTargetError",
    "ConfigError",
    "Outcome",
    "capture_outcome",
    "format_error_for_user",
    "format_error_for_log",
]
