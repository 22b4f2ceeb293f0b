"""
Message Scheduler

Owns the single countdown session and reminder slot, and wires the
validator, countdown and dispatcher together on an AsyncIOScheduler.

Scheduling a new message always stops the running countdown and
cancels the armed reminder before anything new is installed, without
yielding to the event loop in between.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from ..collaborators.launcher import BrowserLauncher, ExternalLauncher
from ..collaborators.notifications import NotificationCollaborator, ReminderNotifier
from ..collaborators.permissions import ConfigPermissions, PermissionCollaborator
from ..config import SchedulerConfig, get_config
from ..utils.errors import AlertArmingError, Outcome, ValidationError, capture_outcome
from ..utils.logger import get_logger
from ..view.presenter import ConsolePresenter, Presenter
from .countdown import CountdownSession, utc_now
from .dispatcher import Dispatcher
from .validator import ScheduleRequest, format_target, validate_request

logger = get_logger(__name__)


@dataclass
class ScheduleConfirmation:
    """Result of accepting a ScheduleRequest."""
    target_instant: datetime
    text: str
    alert_armed: bool


class MessageScheduler:
    """
    Schedules one WhatsApp hand-off at a time.

    Usage:
        scheduler = MessageScheduler()
        scheduler.start()

        confirmation = await scheduler.submit(
            recipient="1234567890",
            message="Hello",
            selected_instant=when,
        )

        # Host view closed
        scheduler.teardown()
        await scheduler.stop()
    """

    def __init__(
        self,
        notifier: Optional[NotificationCollaborator] = None,
        permissions: Optional[PermissionCollaborator] = None,
        launcher: Optional[ExternalLauncher] = None,
        presenter: Optional[Presenter] = None,
        config: Optional[SchedulerConfig] = None,
        scheduler: Optional[AsyncIOScheduler] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._config = config or get_config()
        self._scheduler = scheduler or AsyncIOScheduler(timezone=self._config.zone)
        self._notifier = notifier or ReminderNotifier(
            self._scheduler, timeout=self._config.notification_timeout
        )
        self._presenter = presenter or ConsolePresenter()
        self._dispatcher = Dispatcher(
            permissions or ConfigPermissions(self._config.notifications_enabled),
            launcher or BrowserLauncher(),
            self._presenter,
            base_url=self._config.wa_base_url,
        )
        self._clock = clock
        self._session: Optional[CountdownSession] = None
        self._alert_handle: Optional[str] = None
        # Arms reach the single reminder slot in submission order
        self._arm_lock = asyncio.Lock()
        self._countdown_text = ""
        self._next_id = 1
        self._started = False

    @property
    def session(self) -> Optional[CountdownSession]:
        return self._session

    @property
    def alert_handle(self) -> Optional[str]:
        return self._alert_handle

    @property
    def countdown_text(self) -> str:
        return self._countdown_text

    def start(self) -> None:
        """Start the underlying scheduler."""
        if self._started:
            return

        self._scheduler.start()
        self._started = True
        logger.info("Scheduler started")

    async def stop(self) -> None:
        """Cancel the running countdown and stop the scheduler."""
        if not self._started:
            return

        self.teardown()
        self._scheduler.shutdown(wait=False)
        self._started = False
        logger.info("Scheduler stopped")

    def is_running(self) -> bool:
        """Check if the scheduler is running."""
        return self._started

    async def submit(
        self,
        recipient: Optional[str],
        message: Optional[str],
        selected_instant: Optional[datetime],
    ) -> Optional[ScheduleConfirmation]:
        """
        Validate form input and schedule it.

        Validation failures go to the presenter and leave the current
        session untouched.

        Returns:
            ScheduleConfirmation, or None if the input was rejected
        """
        try:
            request = validate_request(recipient, message, selected_instant, now=self._clock())
        except ValidationError as e:
            logger.info(f"Schedule rejected: {e}")
            self._presenter.show_validation_error(e)
            return None

        return await self.schedule(request)

    async def schedule(self, request: ScheduleRequest) -> ScheduleConfirmation:
        """
        Arm the reminder and start the countdown for an accepted request.

        Any running session is superseded and the previous reminder is
        cancelled first. A reminder that fails to arm is logged and does
        not stop the countdown. If a newer request replaces this one while
        its reminder is arming, no confirmation is shown for it.

        Args:
            request: Validated request

        Returns:
            ScheduleConfirmation with the target formatted for display
        """
        self._supersede_current()

        session = CountdownSession(
            session_id=self._next_id,
            target_instant=request.target_instant,
            publish=self._publish,
            on_expired=lambda: self._dispatcher.dispatch(request),
            clock=self._clock,
        )
        self._next_id += 1
        self._session = session
        session.start(self._scheduler, self._config.tick_seconds)

        # First render happens now; the interval job takes over after that
        await session.tick()

        armed = await self._arm_for(session, request)
        text = f"Message scheduled for {format_target(request.target_instant)}"

        if self._session is not session:
            logger.debug(f"Session {session.session_id} replaced before it was confirmed")
            return ScheduleConfirmation(
                target_instant=request.target_instant,
                text=text,
                alert_armed=False,
            )

        self._presenter.show_confirmation(text)
        logger.info(text)

        return ScheduleConfirmation(
            target_instant=request.target_instant,
            text=text,
            alert_armed=armed.ok,
        )

    def teardown(self) -> None:
        """
        Cancel the running countdown because the host view is gone.

        Safe to call more than once. The reminder stays armed.
        """
        if self._session is not None:
            self._session.cancel()

    def _supersede_current(self) -> None:
        if self._session is not None:
            self._session.supersede()

        if self._alert_handle is not None:
            handle, self._alert_handle = self._alert_handle, None
            self._cancel_alert(handle)

    async def _arm_for(self, session: CountdownSession, request: ScheduleRequest) -> Outcome:
        async with self._arm_lock:
            if self._session is not session:
                return Outcome.failure(
                    AlertArmingError(f"session {session.session_id} was replaced")
                )

            armed = await self._arm_alert(request)
            if not armed.ok:
                return armed

            if self._session is session:
                self._alert_handle = armed.value
            elif armed.value != self._alert_handle:
                # The newer session is still waiting on the lock, so the
                # slot holds only this stale reminder
                logger.debug(f"Withdrawing reminder armed for replaced session {session.session_id}")
                self._cancel_alert(armed.value)
            return armed

    @capture_outcome(lambda e: AlertArmingError(str(e)))
    def _cancel_alert(self, handle: str) -> None:
        self._notifier.cancel(handle)

    @capture_outcome(lambda e: AlertArmingError(str(e)))
    async def _arm_alert(self, request: ScheduleRequest) -> str:
        return await self._notifier.arm_one_shot_alert(
            request.target_instant,
            self._config.reminder_title,
            f"Message to {request.recipient}",
        )

    def _publish(self, text: str) -> None:
        self._countdown_text = text
        self._presenter.show_countdown(text)


# ======================
# GLOBAL INSTANCE
# ======================

_scheduler: Optional[MessageScheduler] = None


def get_message_scheduler() -> MessageScheduler:
    """Get the global message scheduler instance."""
    global _scheduler
    if _scheduler is None:
        _scheduler = MessageScheduler()
    return _scheduler


def start_message_scheduler() -> MessageScheduler:
    """Start the global message scheduler."""
    scheduler = get_message_scheduler()
    scheduler.start()
    return scheduler


async def stop_message_scheduler() -> None:
    """Stop the global message scheduler."""
    global _scheduler
    if _scheduler:
        await _scheduler.stop()
        _scheduler = None
