"""
Scheduler Configuration

Loads settings from environment variables (and a .env file if present).

Keys:
- WA_BASE_URL: Base of the WhatsApp click-to-chat address
- SCHEDULER_TICK_SECONDS: Countdown refresh interval
- REMINDER_TITLE: Title of the reminder notification
- SCHEDULER_TZ: IANA timezone used to interpret picked date/times
- NOTIFICATIONS_ENABLED: Whether reminder notifications are allowed
- NOTIFICATION_TIMEOUT: Seconds a desktop notification stays visible
"""

import os
from dataclasses import dataclass
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from tzlocal import get_localzone_name

from .utils.errors import ConfigError

load_dotenv()

DEFAULT_BASE_URL = "https://wa.me"
DEFAULT_REMINDER_TITLE = "WhatsApp Message Scheduled"


@dataclass
class SchedulerConfig:
    """Runtime settings for the message scheduler."""
    wa_base_url: str = DEFAULT_BASE_URL
    tick_seconds: float = 1.0
    reminder_title: str = DEFAULT_REMINDER_TITLE
    timezone: str = "UTC"
    notifications_enabled: bool = True
    notification_timeout: int = 10

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_config() -> SchedulerConfig:
    """
    Load scheduler configuration from the environment.

    SCHEDULER_TZ falls back to the machine's local timezone.

    Returns:
        SchedulerConfig

    Raises:
        ConfigError: if a numeric setting cannot be parsed or the config is invalid
    """
    try:
        tick_seconds = float(os.getenv("SCHEDULER_TICK_SECONDS", "1"))
    except ValueError as e:
        raise ConfigError("SCHEDULER_TICK_SECONDS", str(e)) from e

    try:
        notification_timeout = int(os.getenv("NOTIFICATION_TIMEOUT", "10"))
    except ValueError as e:
        raise ConfigError("NOTIFICATION_TIMEOUT", str(e)) from e

    config = SchedulerConfig(
        wa_base_url=os.getenv("WA_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
        tick_seconds=tick_seconds,
        reminder_title=os.getenv("REMINDER_TITLE", DEFAULT_REMINDER_TITLE),
        timezone=os.getenv("SCHEDULER_TZ") or get_localzone_name(),
        notifications_enabled=_env_bool("NOTIFICATIONS_ENABLED", True),
        notification_timeout=notification_timeout,
    )

    errors = validate_config(config)
    if errors:
        raise ConfigError("scheduler", "; ".join(errors))

    return config


def validate_config(config: SchedulerConfig) -> list[str]:
    """
    Validate scheduler configuration.

    Returns:
        List of error messages (empty if valid)
    """
    errors = []

    if not config.wa_base_url.startswith(("http://", "https://")):
        errors.append(f"WA_BASE_URL must be an http(s) URL, got {config.wa_base_url!r}")
    if config.tick_seconds <= 0:
        errors.append("SCHEDULER_TICK_SECONDS must be positive")
    if not config.reminder_title.strip():
        errors.append("REMINDER_TITLE must not be empty")
    if config.notification_timeout < 0:
        errors.append("NOTIFICATION_TIMEOUT must not be negative")

    try:
        ZoneInfo(config.timezone)
    except (ZoneInfoNotFoundError, ValueError):
        errors.append(f"Unknown timezone: {config.timezone}")

    return errors


_config: Optional[SchedulerConfig] = None


def get_config() -> SchedulerConfig:
    """Get the process-wide configuration, loading it on first use."""
    global _config
    if _config is None:
        _config = load_config()
    return _config
