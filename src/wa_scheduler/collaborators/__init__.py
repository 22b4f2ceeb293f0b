"""
Collaborators Module

Ports the scheduler calls out to, with desktop implementations:
- Notifications: one-shot reminder via APScheduler + plyer
- Permissions: config-driven capability checks
- Launcher: opens the wa.me address via webbrowser
"""

from .notifications import (
    NotificationCollaborator,
    ReminderNotifier,
    REMINDER_SLOT,
)

from .permissions import (
    PermissionCollaborator,
    PermissionStatus,
    ConfigPermissions,
    NOTIFICATION,
)

from .launcher import (
    ExternalLauncher,
    BrowserLauncher,
    LaunchMode,
)

__all__ = [
    # Notifications
    "NotificationCollaborator",
    "ReminderNotifier",
    "REMINDER_SLOT",
    # Permissions
    "PermissionCollaborator",
    "PermissionStatus",
    "ConfigPermissions",
    "NOTIFICATION",
    # Launcher
    "ExternalLauncher",
    "BrowserLauncher",
    "LaunchMode",
]
