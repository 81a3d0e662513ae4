"""Lightweight in-process event bus.

Task wrappers publish lifecycle events here when given a bus; hosting code
subscribes to observe completions and faults without polling.
"""

from .event_bus import EventBus, Subscription
from .task_events import (
    TASK_EVENTS,
    TaskCancelled,
    TaskCompleted,
    TaskFailed,
    TaskStarted,
    TaskTimedOut,
)

__all__ = [
    "EventBus",
    "Subscription",
    "TASK_EVENTS",
    "TaskStarted",
    "TaskCompleted",
    "TaskCancelled",
    "TaskFailed",
    "TaskTimedOut",
]
