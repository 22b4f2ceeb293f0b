"""
Shared fixtures for scheduler tests.

Collaborators are in-memory fakes and time comes from a controllable
clock. The APScheduler instance is started paused, so jobs are
registered and can be inspected but never fire on their own.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from wa_scheduler.collaborators import LaunchMode, PermissionStatus
from wa_scheduler.config import SchedulerConfig
from wa_scheduler.scheduler import MessageScheduler


# ── Fakes ──────────────────────────────────────────────────


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class RecordingPresenter:
    def __init__(self):
        self.validation_errors = []
        self.confirmations = []
        self.countdowns = []
        self.dispatch_failures = []

    def show_validation_error(self, error) -> None:
        self.validation_errors.append(error)

    def show_confirmation(self, text: str) -> None:
        self.confirmations.append(text)

    def show_countdown(self, text: str) -> None:
        self.countdowns.append(text)

    def show_dispatch_failure(self, error) -> None:
        self.dispatch_failures.append(error)


class FakeNotifier:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.armed = []
        self.cancelled = []

    async def arm_one_shot_alert(self, timestamp, title, body) -> str:
        if self.fail:
            raise RuntimeError("notification service unavailable")
        self.armed.append((timestamp, title, body))
        return f"handle-{len(self.armed)}"

    def cancel(self, handle: str) -> None:
        self.cancelled.append(handle)


class GatedNotifier(FakeNotifier):
    """Single-slot notifier whose first arm waits until the gate opens."""

    def __init__(self):
        super().__init__()
        self.gate = asyncio.Event()
        self.calls = 0
        self.slot = None

    async def arm_one_shot_alert(self, timestamp, title, body) -> str:
        self.calls += 1
        if self.calls == 1:
            await self.gate.wait()
        self.armed.append((timestamp, title, body))
        self.slot = timestamp
        return "reminder"

    def cancel(self, handle: str) -> None:
        self.cancelled.append(handle)
        self.slot = None


class FakePermissions:
    def __init__(self, status: PermissionStatus = PermissionStatus.GRANTED):
        self.status = status
        self.requests = []

    async def ensure_granted(self, capability: str) -> PermissionStatus:
        self.requests.append(capability)
        return self.status


class FakeLauncher:
    def __init__(self, reachable: bool = True, opens: bool = True):
        self.reachable = reachable
        self.opens = opens
        self.checked = []
        self.opened = []

    async def can_open(self, target: str) -> bool:
        self.checked.append(target)
        return self.reachable

    async def open(self, target: str, mode: LaunchMode) -> bool:
        self.opened.append((target, mode))
        return self.opens


# ── Fixtures ───────────────────────────────────────────────


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def presenter():
    return RecordingPresenter()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def permissions():
    return FakePermissions()


@pytest.fixture
def launcher():
    return FakeLauncher()


@pytest.fixture
def config():
    return SchedulerConfig(timezone="UTC")


@pytest_asyncio.fixture
async def aps():
    scheduler = AsyncIOScheduler(timezone=timezone.utc)
    scheduler.start(paused=True)
    yield scheduler
    scheduler.shutdown(wait=False)


@pytest.fixture
def scheduler(aps, clock, presenter, notifier, permissions, launcher, config):
    return MessageScheduler(
        notifier=notifier,
        permissions=permissions,
        launcher=launcher,
        presenter=presenter,
        config=config,
        scheduler=aps,
        clock=clock,
    )
