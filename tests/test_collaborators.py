"""Tests for the desktop notifier, permissions and browser launcher."""

from __future__ import annotations

import webbrowser
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import pytest

from wa_scheduler.collaborators import (
    REMINDER_SLOT,
    BrowserLauncher,
    ConfigPermissions,
    LaunchMode,
    PermissionStatus,
    ReminderNotifier,
)
from wa_scheduler.view import ConsolePresenter
from wa_scheduler.utils.errors import UnreachableTargetError, ValidationError

WHEN = datetime(2030, 1, 1, 9, 0, tzinfo=timezone.utc)


# ── ReminderNotifier ───────────────────────────────────────


class TestReminderNotifier:
    @pytest.mark.asyncio
    async def test_arm_registers_date_job(self, aps):
        notifier = ReminderNotifier(aps)

        handle = await notifier.arm_one_shot_alert(WHEN, "Title", "Body")

        assert handle == REMINDER_SLOT
        job = aps.get_job(handle)
        assert job.trigger.run_date == WHEN
        assert job.args == ("Title", "Body")

    @pytest.mark.asyncio
    async def test_arming_again_reuses_the_slot(self, aps):
        notifier = ReminderNotifier(aps)

        await notifier.arm_one_shot_alert(WHEN, "Title", "First")
        await notifier.arm_one_shot_alert(WHEN + timedelta(hours=1), "Title", "Second")

        jobs = aps.get_jobs()
        assert len(jobs) == 1
        assert jobs[0].trigger.run_date == WHEN + timedelta(hours=1)
        assert jobs[0].args == ("Title", "Second")

    @pytest.mark.asyncio
    async def test_cancel_is_idempotent(self, aps):
        notifier = ReminderNotifier(aps)
        handle = await notifier.arm_one_shot_alert(WHEN, "Title", "Body")

        notifier.cancel(handle)
        notifier.cancel(handle)

        assert aps.get_job(handle) is None

    def test_show_uses_plyer(self):
        notifier = ReminderNotifier(MagicMock(), timeout=5)

        with patch("wa_scheduler.collaborators.notifications.notification") as mock_notification:
            notifier._show("Title", "Body")

        mock_notification.notify.assert_called_once_with(
            title="Title",
            message="Body",
            app_name="WA Message Scheduler",
            timeout=5,
        )

    def test_show_without_backend_does_not_raise(self):
        notifier = ReminderNotifier(MagicMock())

        with patch("wa_scheduler.collaborators.notifications.notification") as mock_notification:
            mock_notification.notify.side_effect = NotImplementedError
            notifier._show("Title", "Body")


# ── ConfigPermissions ──────────────────────────────────────


class TestConfigPermissions:
    @pytest.mark.asyncio
    async def test_granted_when_enabled(self):
        permissions = ConfigPermissions(notifications_enabled=True)

        assert await permissions.ensure_granted("notification") is PermissionStatus.GRANTED
        assert permissions.requested == {"notification"}

    @pytest.mark.asyncio
    async def test_denied_when_disabled(self):
        permissions = ConfigPermissions(notifications_enabled=False)

        assert await permissions.ensure_granted("notification") is PermissionStatus.DENIED

    @pytest.mark.asyncio
    async def test_other_capabilities_granted(self):
        permissions = ConfigPermissions(notifications_enabled=False)

        assert await permissions.ensure_granted("camera") is PermissionStatus.GRANTED


# ── BrowserLauncher ────────────────────────────────────────


class TestBrowserLauncher:
    @pytest.mark.asyncio
    async def test_non_http_target_cannot_open(self):
        assert await BrowserLauncher().can_open("whatsapp://send?phone=1") is False

    @pytest.mark.asyncio
    async def test_no_browser_cannot_open(self):
        with patch("webbrowser.get", side_effect=webbrowser.Error("none")):
            assert await BrowserLauncher().can_open("https://wa.me/1/?text=x") is False

    @pytest.mark.asyncio
    async def test_can_open_with_browser(self):
        with patch("webbrowser.get", return_value=MagicMock()):
            assert await BrowserLauncher().can_open("https://wa.me/1/?text=x") is True

    @pytest.mark.asyncio
    async def test_open_uses_new_window_for_external_mode(self):
        controller = MagicMock()
        controller.open.return_value = True

        with patch("webbrowser.get", return_value=controller) as mock_get:
            opened = await BrowserLauncher("firefox").open(
                "https://wa.me/1/?text=x", LaunchMode.EXTERNAL_APPLICATION
            )

        assert opened is True
        mock_get.assert_called_once_with("firefox")
        controller.open.assert_called_once_with("https://wa.me/1/?text=x", 1)


# ── ConsolePresenter ───────────────────────────────────────


class TestConsolePresenter:
    def test_prints_feedback(self, capsys):
        presenter = ConsolePresenter()

        presenter.show_validation_error(ValidationError(missing_fields=["recipient"]))
        presenter.show_confirmation("Message scheduled for 2026-10-19 14:00")
        presenter.show_countdown("Time until next message: 5 seconds")
        presenter.show_dispatch_failure(UnreachableTargetError("https://wa.me/1/?text=x"))

        out = capsys.readouterr().out.splitlines()
        assert out == [
            "[!] Please fill all fields and select a date/time",
            "[OK] Message scheduled for 2026-10-19 14:00",
            "Time until next message: 5 seconds",
            "[!] Could not launch WhatsApp",
        ]
