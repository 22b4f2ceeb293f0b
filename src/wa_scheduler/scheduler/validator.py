"""
Input Validation

Turns raw form input into an immutable ScheduleRequest.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, tzinfo
from typing import Optional

from ..utils.errors import ValidationError

DISPLAY_FORMAT = "%Y-%m-%d %H:%M"


@dataclass(frozen=True)
class ScheduleRequest:
    """An accepted request to hand a message off at target_instant."""
    recipient: str
    message_body: str
    target_instant: datetime


def validate_request(
    recipient: Optional[str],
    message: Optional[str],
    selected_instant: Optional[datetime],
    now: Optional[datetime] = None,
) -> ScheduleRequest:
    """
    Check the form input and build a ScheduleRequest.

    The recipient is stored trimmed; the message body is kept as typed.
    No phone number format checking happens here.

    Args:
        recipient: Raw phone number text
        message: Raw message text
        selected_instant: Timezone-aware instant from the picker, or None
        now: Moment of scheduling (defaults to the current time)

    Returns:
        ScheduleRequest

    Raises:
        ValidationError: listing every missing field, or flagging a naive
            or past time
    """
    missing = []
    if not recipient or not recipient.strip():
        missing.append("recipient")
    if not message or not message.strip():
        missing.append("message")
    if selected_instant is None:
        missing.append("time")

    if missing:
        raise ValidationError(missing_fields=missing)

    if selected_instant.utcoffset() is None:
        raise ValidationError(naive_time=True)

    if now is None:
        now = datetime.now(selected_instant.tzinfo)
    if selected_instant <= now:
        raise ValidationError(past_time=True)

    return ScheduleRequest(
        recipient=recipient.strip(),
        message_body=message,
        target_instant=selected_instant,
    )


def combine_picker_selection(
    picked_date: Optional[date],
    picked_time: Optional[time],
    tz: tzinfo,
) -> Optional[datetime]:
    """
    Build the target instant from the date and time pickers.

    Only the hour and minute of picked_time are used, so the instant
    always lands on a whole minute in tz. Returns None when either
    picker was dismissed.
    """
    if picked_date is None or picked_time is None:
        return None

    return datetime(
        picked_date.year,
        picked_date.month,
        picked_date.day,
        picked_time.hour,
        picked_time.minute,
        tzinfo=tz,
    )


def format_target(instant: datetime) -> str:
    """Format an instant as YYYY-MM-DD HH:mm."""
    return instant.strftime(DISPLAY_FORMAT)
