"""
Permissions

Desktop stand-in for the runtime permission prompt. Whether reminders
may be shown is decided by the NOTIFICATIONS_ENABLED setting.
"""

from enum import Enum
from typing import Protocol

from ..utils.logger import get_logger

logger = get_logger(__name__)

NOTIFICATION = "notification"


class PermissionStatus(Enum):
    GRANTED = "granted"
    DENIED = "denied"


class PermissionCollaborator(Protocol):
    """Port for requesting a capability."""

    async def ensure_granted(self, capability: str) -> PermissionStatus:
        """Request capability if needed and report the result."""


class ConfigPermissions:
    """Grants capabilities according to configuration."""

    def __init__(self, notifications_enabled: bool = True):
        self._notifications_enabled = notifications_enabled
        self.requested: set[str] = set()

    async def ensure_granted(self, capability: str) -> PermissionStatus:
        if capability not in self.requested:
            self.requested.add(capability)
            logger.debug(f"Permission requested: {capability}")

        if capability == NOTIFICATION and not self._notifications_enabled:
            return PermissionStatus.DENIED
        return PermissionStatus.GRANTED
