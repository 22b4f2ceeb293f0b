"""
View Module

Presentation port and the console implementation.
"""

from .presenter import Presenter, ConsolePresenter

__all__ = ["Presenter", "ConsolePresenter"]
