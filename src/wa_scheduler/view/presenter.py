"""
Presenter

What the scheduler shows to the user.
"""

from typing import Protocol

from ..utils.errors import ValidationError, UnreachableTargetError, format_error_for_user


class Presenter(Protocol):
    """Port for everything the scheduler reports to the user."""

    def show_validation_error(self, error: ValidationError) -> None: ...

    def show_confirmation(self, text: str) -> None: ...

    def show_countdown(self, text: str) -> None: ...

    def show_dispatch_failure(self, error: UnreachableTargetError) -> None: ...


class ConsolePresenter:
    """Prints scheduler feedback to stdout."""

    def show_validation_error(self, error: ValidationError) -> None:
        print(f"[!] {format_error_for_user(error)}")

    def show_confirmation(self, text: str) -> None:
        print(f"[OK] {text}")

    def show_countdown(self, text: str) -> None:
        print(text)

    def show_dispatch_failure(self, error: UnreachableTargetError) -> None:
        print(f"[!] {format_error_for_user(error)}")
