"""Background task lifecycle helpers.

Run a unit of work on a background thread, cancel it cooperatively, wait for
it with a timeout and tear it down deterministically.
"""

from taskhelper.core.errors import AppError, CancelledError, DomainError, ValidationError
from taskhelper.core.events import EventBus
from taskhelper.core.tasks import (
    CancellationSignal,
    IterationNotifier,
    Observer,
    PeriodicTaskWrapper,
    TaskState,
    TaskWrapper,
    WaitableTaskWrapper,
)

__version__ = "0.1.0"

__all__ = [
    "AppError",
    "CancelledError",
    "DomainError",
    "ValidationError",
    "EventBus",
    "CancellationSignal",
    "IterationNotifier",
    "Observer",
    "PeriodicTaskWrapper",
    "TaskState",
    "TaskWrapper",
    "WaitableTaskWrapper",
]
