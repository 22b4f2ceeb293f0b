"""
Scheduler Form

State behind the scheduling screen: the phone and message fields, the
picked date/time, and the countdown line. Widgets bind to this object
and call its methods; the form itself draws nothing.
"""

from datetime import date, datetime, time
from typing import Optional

from .config import SchedulerConfig, get_config
from .scheduler.message_scheduler import MessageScheduler, ScheduleConfirmation
from .scheduler.validator import combine_picker_selection, format_target
from .utils.logger import get_logger

logger = get_logger(__name__)

SELECT_LABEL = "Select Date and Time"


class SchedulerForm:
    """
    Host view for a MessageScheduler.

    Usage:
        form = SchedulerForm(scheduler)
        form.phone = "1234567890"
        form.message = "Hello"
        form.select_date_time(picked_date, picked_time)
        await form.submit()
        ...
        form.dispose()
    """

    def __init__(self, scheduler: MessageScheduler, config: Optional[SchedulerConfig] = None):
        self._scheduler = scheduler
        self._config = config or get_config()
        self.phone = ""
        self.message = ""
        self.scheduled_at: Optional[datetime] = None
        self._mounted = True

    @property
    def mounted(self) -> bool:
        return self._mounted

    @property
    def time_button_label(self) -> str:
        if self.scheduled_at is None:
            return SELECT_LABEL
        return f"Scheduled for: {format_target(self.scheduled_at)}"

    @property
    def countdown_text(self) -> str:
        return self._scheduler.countdown_text

    def select_date_time(
        self,
        picked_date: Optional[date],
        picked_time: Optional[time],
    ) -> Optional[datetime]:
        """
        Store the picker result.

        A dismissed picker (either value None) keeps the previous selection.
        """
        if not self._mounted:
            return None

        selected = combine_picker_selection(picked_date, picked_time, self._config.zone)
        if selected is not None:
            self.scheduled_at = selected
        return selected

    async def submit(self) -> Optional[ScheduleConfirmation]:
        """Schedule the current field values."""
        if not self._mounted:
            return None
        return await self._scheduler.submit(self.phone, self.message, self.scheduled_at)

    def dispose(self) -> None:
        """Tear the view down; the running countdown stops immediately."""
        if not self._mounted:
            return
        self._mounted = False
        self._scheduler.teardown()
        logger.debug("Scheduler form disposed")
