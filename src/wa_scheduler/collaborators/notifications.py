"""
Reminder Notifications

Arms a one-shot desktop reminder for the scheduled time.

There is a single reminder slot: arming again replaces whatever was
armed before.
"""

from datetime import datetime
from typing import Protocol

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.date import DateTrigger
from plyer import notification

from ..utils.logger import get_logger

logger = get_logger(__name__)

REMINDER_SLOT = "reminder"
APP_NAME = "WA Message Scheduler"


class NotificationCollaborator(Protocol):
    """Port for arming and cancelling the reminder alert."""

    async def arm_one_shot_alert(self, timestamp: datetime, title: str, body: str) -> str:
        """Arm an alert for timestamp and return its handle."""

    def cancel(self, handle: str) -> None:
        """Cancel a previously armed alert. Unknown handles are ignored."""


class ReminderNotifier:
    """
    Shows the reminder through plyer when its APScheduler date job fires.

    Usage:
        notifier = ReminderNotifier(scheduler)
        handle = await notifier.arm_one_shot_alert(when, "Title", "Body")
        notifier.cancel(handle)
    """

    def __init__(self, scheduler: BaseScheduler, timeout: int = 10):
        self._scheduler = scheduler
        self._timeout = timeout

    async def arm_one_shot_alert(self, timestamp: datetime, title: str, body: str) -> str:
        self._scheduler.add_job(
            self._show,
            trigger=DateTrigger(run_date=timestamp),
            args=[title, body],
            id=REMINDER_SLOT,
            replace_existing=True,
            misfire_grace_time=None,
        )
        logger.info(f"Reminder armed for {timestamp.isoformat()}")
        return REMINDER_SLOT

    def cancel(self, handle: str) -> None:
        try:
            self._scheduler.remove_job(handle)
            logger.info("Reminder cancelled")
        except JobLookupError:
            pass

    def _show(self, title: str, body: str) -> None:
        try:
            notification.notify(
                title=title,
                message=body,
                app_name=APP_NAME,
                timeout=self._timeout,
            )
        except NotImplementedError:
            logger.warning(f"No notification backend available, reminder not shown: {title}")
