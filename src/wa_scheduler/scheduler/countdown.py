"""
Countdown Session

A one-second repeating tick that renders the time left until a target
instant and fires a callback once when it is reached.

States:
    RUNNING -> EXPIRED     target reached
    RUNNING -> SUPERSEDED  a newer request replaced this one
    RUNNING -> CANCELLED   the host view was torn down

The tick source is an APScheduler interval job. Stopping a session
removes its job synchronously, so no tick can run after supersede()
or cancel() returns.
"""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Awaitable, Callable, Optional

from apscheduler.job import Job
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.interval import IntervalTrigger

from ..utils.logger import get_logger, log_session_transition

logger = get_logger(__name__)

COUNTDOWN_PREFIX = "Time until next message: "
PASSED_TEXT = "Message time has passed"


class SessionStatus(Enum):
    """Countdown session states."""
    RUNNING = "running"
    EXPIRED = "expired"
    SUPERSEDED = "superseded"
    CANCELLED = "cancelled"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_remaining(remaining: timedelta) -> str:
    """
    Format a non-negative duration for the countdown display.

    Days, hours and minutes are left out when zero; seconds are always
    shown. Fractions of a second are dropped.

    Example:
        format_remaining(timedelta(seconds=65))
        -> "Time until next message: 1 minutes, 5 seconds"
    """
    total = int(remaining.total_seconds())
    days, rest = divmod(total, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, seconds = divmod(rest, 60)

    parts = []
    if days > 0:
        parts.append(f"{days} days")
    if hours > 0:
        parts.append(f"{hours} hours")
    if minutes > 0:
        parts.append(f"{minutes} minutes")
    parts.append(f"{seconds} seconds")

    return COUNTDOWN_PREFIX + ", ".join(parts)


class CountdownSession:
    """
    Countdown towards a single target instant.

    Args:
        session_id: Sequence number, used for the tick job id and logs
        target_instant: Timezone-aware instant to count down to
        publish: Receives each rendered status line
        on_expired: Awaited exactly once when the target is reached
        clock: Returns the current aware datetime
    """

    def __init__(
        self,
        session_id: int,
        target_instant: datetime,
        publish: Callable[[str], None],
        on_expired: Callable[[], Awaitable[object]],
        clock: Callable[[], datetime] = utc_now,
    ):
        self.session_id = session_id
        self.target_instant = target_instant
        self.status = SessionStatus.RUNNING
        self.last_remaining: Optional[timedelta] = None
        self.tick_count = 0
        self._publish = publish
        self._on_expired = on_expired
        self._clock = clock
        self._job: Optional[Job] = None

    @property
    def job_id(self) -> str:
        return f"countdown_{self.session_id}"

    @property
    def is_running(self) -> bool:
        return self.status is SessionStatus.RUNNING

    def start(self, scheduler: BaseScheduler, interval_seconds: float = 1.0) -> None:
        """Register the repeating tick job. The first job run is one interval away."""
        if not self.is_running or self._job is not None:
            return

        self._job = scheduler.add_job(
            self.tick,
            trigger=IntervalTrigger(seconds=interval_seconds),
            id=self.job_id,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        logger.debug(f"Session {self.session_id} ticking every {interval_seconds}s")

    async def tick(self) -> None:
        """Recompute the remaining time; expire and dispatch when it runs out."""
        if not self.is_running:
            return

        self.tick_count += 1
        remaining = self.target_instant - self._clock()
        self.last_remaining = remaining

        if remaining > timedelta(0):
            self._publish(format_remaining(remaining))
            return

        self._transition(SessionStatus.EXPIRED)
        self._publish(PASSED_TEXT)
        await self._on_expired()

    def supersede(self) -> bool:
        """Stop this session because a newer one replaces it."""
        return self._transition(SessionStatus.SUPERSEDED)

    def cancel(self) -> bool:
        """Stop this session because its host went away."""
        return self._transition(SessionStatus.CANCELLED)

    def _transition(self, new_status: SessionStatus) -> bool:
        # Terminal states never change again
        if not self.is_running:
            return False

        self._stop_ticking()
        old_status = self.status
        self.status = new_status
        log_session_transition(
            logger,
            self.session_id,
            old_status.value,
            new_status.value,
            self.target_instant,
        )
        return True

    def _stop_ticking(self) -> None:
        if self._job is None:
            return

        job, self._job = self._job, None
        try:
            job.remove()
        except JobLookupError:
            pass
