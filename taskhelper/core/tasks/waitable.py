from __future__ import annotations

import logging
from threading import Event, current_thread

from taskhelper import config
from taskhelper.core.errors import DomainError, ValidationError
from taskhelper.core.events import EventBus
from taskhelper.core.events.task_events import TaskTimedOut

from .task_wrapper import TaskBody, TaskWrapper

logger = logging.getLogger(__name__)


class WaitableTaskWrapper(TaskWrapper):
    """TaskWrapper whose completion can be waited on from another thread."""

    def __init__(
        self,
        body: TaskBody | None = None,
        *,
        name: str | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        super().__init__(body, name=name, event_bus=event_bus)
        self._completion: Event | None = None

    def wait(self, timeout_ms: int | None = None, force_cancel_on_timeout: bool = False) -> bool:
        """Block until the current run finishes.

        Returns True when the run finished within ``timeout_ms`` (or when there
        is nothing to wait for), False on timeout. With
        ``force_cancel_on_timeout`` the task is stopped before returning False.
        ``timeout_ms=None`` waits without limit, and so does a timeout longer
        than the platform timer can express.
        """
        if timeout_ms is not None and timeout_ms < 0:
            raise ValidationError(f"timeout_ms must be >= 0, got {timeout_ms}")

        with self._lock:
            if self._thread is None:
                return True
            if self._thread is current_thread():
                raise DomainError(f"Task {self.name} cannot wait on itself")
            completion = self._completion
            run_id = self._run_id
        assert completion is not None

        if timeout_ms is None or timeout_ms > config.MAX_WAIT_MS:
            completion.wait()
            return True

        if completion.wait(timeout_ms / 1000.0):
            return True

        logger.debug(
            "Wait on task %s timed out after %dms", self.name, timeout_ms, extra={"task": self.name}
        )
        if force_cancel_on_timeout:
            if run_id is not None:
                self._publish(TaskTimedOut(run_id=run_id, name=self.name, timeout_ms=timeout_ms))
            self._stop(run_id)
        return False

    def _begin_run(self) -> None:
        self._completion = Event()

    def _end_run(self) -> None:
        if self._completion is not None:
            self._completion.set()
