"""Background task wrappers.

A small, thread-based lifecycle primitive: one background thread per wrapper,
cooperative cancellation, deterministic teardown.
"""

from .cancellation import CancellationSignal
from .notifier import IterationNotifier, Observer
from .periodic import PeriodicTaskWrapper, TickLoop
from .task_wrapper import TaskBody, TaskState, TaskWrapper
from .waitable import WaitableTaskWrapper

__all__ = [
    "CancellationSignal",
    "IterationNotifier",
    "Observer",
    "PeriodicTaskWrapper",
    "TaskBody",
    "TaskState",
    "TaskWrapper",
    "TickLoop",
    "WaitableTaskWrapper",
]
