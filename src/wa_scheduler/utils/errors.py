"""
Error Handling Utilities

Structured errors and result types for the message scheduler.

Only ValidationError and UnreachableTargetError are meant for the user;
AlertArmingError and PermissionDeniedError are logged and absorbed.
"""

from typing import Optional, Callable, Any
from dataclasses import dataclass
from functools import wraps
import asyncio
import logging
import traceback

logger = logging.getLogger(__name__)


class SchedulerError(Exception):
    """Base exception for scheduler errors."""

    def __init__(self, message: str, user_message: Optional[str] = None):
        """
        Initialize scheduler error.

        Args:
            message: Technical error message for logging
            user_message: User-friendly message to display
        """
        super().__init__(message)
        self.user_message = user_message or "Sorry, something went wrong. Please try again."


class ValidationError(SchedulerError):
    """Schedule input is missing or not usable."""

    def __init__(
        self,
        missing_fields: Optional[list[str]] = None,
        past_time: bool = False,
        naive_time: bool = False,
    ):
        self.missing_fields = list(missing_fields or [])
        self.past_time = past_time
        self.naive_time = naive_time

        if self.missing_fields:
            message = f"Missing fields: {', '.join(self.missing_fields)}"
            user_message = "Please fill all fields and select a date/time"
        elif naive_time:
            message = "Selected time has no timezone"
            user_message = "Please select a date/time"
        else:
            message = "Selected time is not in the future"
            user_message = "Please select a date/time in the future"

        super().__init__(message, user_message)


class AlertArmingError(SchedulerError):
    """The notification collaborator could not arm the reminder."""

    def __init__(self, message: str):
        super().__init__(
            f"Reminder arming failed: {message}",
            "The reminder could not be set, but the countdown is running.",
        )


class PermissionDeniedError(SchedulerError):
    """A capability was refused by the permission collaborator."""

    def __init__(self, capability: str):
        self.capability = capability
        super().__init__(
            f"Permission denied for {capability}",
            "Notifications are disabled, so no reminder will be shown.",
        )


class UnreachableTargetError(SchedulerError):
    """The external messaging app cannot open the target address."""

    def __init__(self, target: str, message: Optional[str] = None):
        self.target = target
        detail = f"Cannot open {target}"
        if message:
            detail += f": {message}"
        super().__init__(detail, "Could not launch WhatsApp")


class ConfigError(SchedulerError):
    """Configuration error."""

    def __init__(self, config_name: str, message: str):
        super().__init__(
            f"Configuration error for {config_name}: {message}",
            "There's a configuration issue. Please check your settings.",
        )


@dataclass
class Outcome:
    """Success or failure of a collaborator call."""
    ok: bool
    value: Any = None
    error: Optional[SchedulerError] = None

    @classmethod
    def success(cls, value: Any = None) -> "Outcome":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: SchedulerError) -> "Outcome":
        return cls(ok=False, error=error)


def capture_outcome(error_factory: Callable[[Exception], SchedulerError]):
    """
    Decorator that turns a call into an Outcome.

    Returned values become successes. A SchedulerError raised by the call
    becomes a failure as is; any other exception is wrapped with
    error_factory.

    Usage:
        @capture_outcome(lambda e: AlertArmingError(str(e)))
        async def arm(...):
            ...
    """
    def to_failure(func_name: str, e: Exception) -> Outcome:
        error = e if isinstance(e, SchedulerError) else error_factory(e)
        logger.warning(f"{func_name} failed: {error}")
        logger.debug(format_error_for_log(e))
        return Outcome.failure(error)

    def decorator(func: Callable):
        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            try:
                return Outcome.success(await func(*args, **kwargs))
            except Exception as e:
                return to_failure(func.__name__, e)

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            try:
                return Outcome.success(func(*args, **kwargs))
            except Exception as e:
                return to_failure(func.__name__, e)

        if asyncio.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator


def format_error_for_user(error: Exception) -> str:
    """
    Format an error for display to the user.

    Args:
        error: The exception

    Returns:
        User-friendly error message
    """
    if isinstance(error, SchedulerError):
        return error.user_message

    return "Sorry, I encountered an unexpected error. Please try again."


def format_error_for_log(error: Exception) -> str:
    """
    Format an error for logging.

    Args:
        error: The exception

    Returns:
        Detailed error message with traceback
    """
    error_type = type(error).__name__
    error_msg = str(error)
    tb = traceback.format_exc()

    return f"{error_type}: {error_msg}\n{tb}"
