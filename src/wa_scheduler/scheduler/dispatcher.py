"""
Dispatcher

Builds the wa.me address for a request and hands it to the external
launcher. Delivery itself is up to WhatsApp; the hand-off is where this
module's job ends. A failed hand-off is reported once and not retried.
"""

from urllib.parse import quote

from ..collaborators.launcher import ExternalLauncher, LaunchMode
from ..collaborators.permissions import NOTIFICATION, PermissionCollaborator, PermissionStatus
from ..config import DEFAULT_BASE_URL
from ..utils.errors import (
    Outcome,
    PermissionDeniedError,
    SchedulerError,
    UnreachableTargetError,
    capture_outcome,
)
from ..utils.logger import get_logger, log_dispatch, with_logging
from ..view.presenter import Presenter
from .validator import ScheduleRequest

logger = get_logger(__name__)

# Characters encodeURIComponent leaves alone besides alphanumerics and "-_."
_UNESCAPED = "!~*'()"


def build_target_url(recipient: str, message: str, base_url: str = DEFAULT_BASE_URL) -> str:
    """
    Build the click-to-chat address for a message.

    Example:
        build_target_url("1234567890", "Hello there")
        -> "https://wa.me/1234567890/?text=Hello%20there"
    """
    text = quote(message, safe=_UNESCAPED)
    return f"{base_url.rstrip('/')}/{recipient}/?text={text}"


def _as_scheduler_error(e: Exception) -> SchedulerError:
    return SchedulerError(str(e))


class Dispatcher:
    """
    Hands scheduled messages off to WhatsApp.

    Usage:
        dispatcher = Dispatcher(permissions, launcher, presenter)
        outcome = await dispatcher.dispatch(request)
        if not outcome.ok:
            ...  # presenter was already told
    """

    def __init__(
        self,
        permissions: PermissionCollaborator,
        launcher: ExternalLauncher,
        presenter: Presenter,
        base_url: str = DEFAULT_BASE_URL,
    ):
        self._permissions = permissions
        self._launcher = launcher
        self._presenter = presenter
        self._base_url = base_url

    @with_logging(logger)
    async def dispatch(self, request: ScheduleRequest) -> Outcome:
        """
        Request the notification permission, then open the target.

        A denied permission does not stop the hand-off.

        Returns:
            Outcome whose value is the opened address, or whose error is
            an UnreachableTargetError
        """
        permission = await self._ensure_permission()
        target = build_target_url(request.recipient, request.message_body, self._base_url)

        outcome = await self._hand_off(target)
        permission_state = "granted" if permission.ok else "denied"

        if outcome.ok:
            log_dispatch(logger, request.recipient, target, True, permission_state)
        else:
            log_dispatch(
                logger,
                request.recipient,
                target,
                False,
                permission_state,
                error=str(outcome.error),
            )
            self._presenter.show_dispatch_failure(outcome.error)

        return outcome

    @capture_outcome(lambda e: PermissionDeniedError(NOTIFICATION))
    async def _ensure_permission(self) -> PermissionStatus:
        status = await self._permissions.ensure_granted(NOTIFICATION)
        if status is not PermissionStatus.GRANTED:
            raise PermissionDeniedError(NOTIFICATION)
        return status

    @capture_outcome(_as_scheduler_error)
    async def _hand_off(self, target: str) -> str:
        try:
            reachable = await self._launcher.can_open(target)
            opened = reachable and await self._launcher.open(target, LaunchMode.EXTERNAL_APPLICATION)
        except Exception as e:
            raise UnreachableTargetError(target, str(e)) from e

        if not reachable:
            raise UnreachableTargetError(target)
        if not opened:
            raise UnreachableTargetError(target, "launcher refused the address")
        return target
