"""
Scheduler Module

Scheduling and countdown core for timed WhatsApp hand-offs.

This module provides:
- MessageScheduler: Owns the countdown session and reminder slot
- CountdownSession: Per-second countdown state machine
- Dispatcher: Builds the wa.me address and opens it
- Validation: Form input to ScheduleRequest

Usage:
------
```python
from wa_scheduler.scheduler import (
    start_message_scheduler,
    stop_message_scheduler,
)

scheduler = start_message_scheduler()
await scheduler.submit("1234567890", "Hello", when)

# On shutdown
await stop_message_scheduler()
```
"""

from .validator import (
    ScheduleRequest,
    validate_request,
    combine_picker_selection,
    format_target,
)

from .countdown import (
    CountdownSession,
    SessionStatus,
    format_remaining,
    PASSED_TEXT,
)

from .dispatcher import (
    Dispatcher,
    build_target_url,
)

from .message_scheduler import (
    MessageScheduler,
    ScheduleConfirmation,
    get_message_scheduler,
    start_message_scheduler,
    stop_message_scheduler,
)

__all__ = [
    # Validation
    "ScheduleRequest",
    "validate_request",
    "combine_picker_selection",
    "format_target",
    # Countdown
    "CountdownSession",
    "SessionStatus",
    "format_remaining",
    "PASSED_TEXT",
    # Dispatch
    "Dispatcher",
    "build_target_url",
    # Scheduler
    "MessageScheduler",
    "ScheduleConfirmation",
    "get_message_scheduler",
    "start_message_scheduler",
    "stop_message_scheduler",
]
