"""
External Launcher

Hands a wa.me address to the system so WhatsApp (or WhatsApp Web)
opens with the recipient and text pre-filled.
"""

import asyncio
import webbrowser
from enum import Enum
from typing import Optional, Protocol
from urllib.parse import urlparse

from ..utils.logger import get_logger

logger = get_logger(__name__)


class LaunchMode(Enum):
    """How the target should be opened."""
    PLATFORM_DEFAULT = 0
    EXTERNAL_APPLICATION = 1


class ExternalLauncher(Protocol):
    """Port for opening an address in another application."""

    async def can_open(self, target: str) -> bool:
        """Whether something on this machine can handle target."""

    async def open(self, target: str, mode: LaunchMode) -> bool:
        """Open target; True when the hand-off was accepted."""


class BrowserLauncher:
    """Opens targets through the webbrowser module."""

    def __init__(self, browser: Optional[str] = None):
        self._browser = browser

    async def can_open(self, target: str) -> bool:
        if urlparse(target).scheme not in ("http", "https"):
            return False
        try:
            webbrowser.get(self._browser)
        except webbrowser.Error:
            logger.warning("No browser available to open the target")
            return False
        return True

    async def open(self, target: str, mode: LaunchMode) -> bool:
        controller = webbrowser.get(self._browser)
        # Browser controllers may block while spawning a process
        return await asyncio.to_thread(controller.open, target, mode.value)
