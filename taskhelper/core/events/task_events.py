from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class TaskStarted:
    run_id: str
    name: str


@dataclass(frozen=True, slots=True)
class TaskCompleted:
    run_id: str
    name: str


@dataclass(frozen=True, slots=True)
class TaskCancelled:
    run_id: str
    name: str


@dataclass(frozen=True, slots=True)
class TaskFailed:
    """Emitted when a task body raised something other than a cancellation."""

    run_id: str
    name: str
    error: str


@dataclass(frozen=True, slots=True)
class TaskTimedOut:
    """Emitted when a wait timed out and the task was torn down."""

    run_id: str
    name: str
    timeout_ms: int


# Everything a task wrapper can publish over one run.
TASK_EVENTS: tuple[type, ...] = (TaskStarted, TaskCompleted, TaskCancelled, TaskFailed, TaskTimedOut)
