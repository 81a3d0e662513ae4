from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from enum import Enum
from threading import Condition, RLock, Thread, current_thread
from types import TracebackType

from taskhelper import config
from taskhelper.core.errors import CancelledError
from taskhelper.core.events import EventBus
from taskhelper.core.events.task_events import (
    TaskCancelled,
    TaskCompleted,
    TaskFailed,
    TaskStarted,
)
from taskhelper.core.observability.timing import time_block

from .cancellation import CancellationSignal

logger = logging.getLogger(__name__)

TaskBody = Callable[[CancellationSignal], None]
RunOutcome = TaskCompleted | TaskCancelled | TaskFailed


class TaskState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPING = "stopping"


class TaskWrapper:
    """Runs one body at a time on a background thread with cooperative cancellation.

    - ``run()`` is fire-and-forget and idempotent: a second call while running
      does nothing.
    - ``dispose()`` cancels and joins, so once it returns no code from the body
      is still executing. Prefer ``with TaskWrapper(...) as task:``; the
      finalizer only requests cancellation.
    - Faults raised by the body are logged and end the run. They never reach
      the thread that called ``run()``; observe them via ``running``,
      ``last_error`` or the ``TaskFailed`` event.

    The body is either injected (``TaskWrapper(body)``) or provided by
    overriding ``execute_body``. It must poll the signal it is given.
    """

    def __init__(
        self,
        body: TaskBody | None = None,
        *,
        name: str | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self._body = body
        self.name = name or type(self).__name__
        self._bus = event_bus
        self._lock = RLock()
        self._state_changed = Condition(self._lock)
        self._state = TaskState.IDLE
        self._thread: Thread | None = None
        self._signal: CancellationSignal | None = None
        self._run_id: str | None = None
        self._disposed = False
        self._last_error: Exception | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def running(self) -> bool:
        with self._lock:
            return self._thread is not None

    @property
    def state(self) -> TaskState:
        with self._lock:
            return self._state

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def run_id(self) -> str | None:
        with self._lock:
            return self._run_id

    @property
    def last_error(self) -> Exception | None:
        """The exception that ended the most recent run, if any."""
        return self._last_error

    def run(self) -> None:
        with self._lock:
            while self._state is TaskState.STOPPING:
                if self._thread is current_thread():
                    return
                self._state_changed.wait()
            if self._disposed:
                logger.warning("run() on disposed task %s ignored", self.name)
                return
            if self._state is not TaskState.IDLE:
                return

            run_id = uuid.uuid4().hex
            signal = CancellationSignal()
            thread = Thread(
                target=self._execute,
                args=(run_id, signal),
                name=f"{config.THREAD_NAME_PREFIX}-{self.name}",
                daemon=config.DAEMON_THREADS,
            )
            self._run_id = run_id
            self._signal = signal
            self._thread = thread
            self._state = TaskState.RUNNING
            self._last_error = None
            self._begin_run()
            try:
                thread.start()
            except RuntimeError:
                self._end_run()
                self._clear_run_locked()
                raise

    def dispose(self) -> None:
        with self._lock:
            if self._disposed:
                return
            self._disposed = True
        with time_block(f"dispose {self.name}", logger=logger, level=logging.DEBUG):
            self._stop()
            self.dispose_managed()

    def __enter__(self) -> TaskWrapper:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.dispose()

    def __del__(self) -> None:
        # Finalizer path: no join, no payload resources, no lock.
        if getattr(self, "_disposed", True):
            return
        self._disposed = True
        signal = getattr(self, "_signal", None)
        if signal is not None:
            signal.cancel()

    # ------------------------------------------------------------------
    # Overridables
    # ------------------------------------------------------------------

    def execute_body(self, signal: CancellationSignal) -> None:
        """The unit of work. Runs on the background thread."""
        if self._body is not None:
            self._body(signal)

    def dispose_managed(self) -> None:
        """Release payload-owned resources.

        Called once, after the run has been stopped and joined.
        """

    def _begin_run(self) -> None:
        """Hook called with the lock held just before a new thread starts."""

    def _end_run(self) -> None:
        """Hook called with the lock held when the current run is over."""

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _stop(self, run_id: str | None = None) -> None:
        """Request cancellation and block until the run's thread has exited.

        With ``run_id`` only that run is stopped; a newer run is left alone.
        """
        with self._lock:
            while self._state is TaskState.STOPPING:
                if self._thread is current_thread():
                    return
                self._state_changed.wait()
            if self._state is TaskState.IDLE:
                return
            if run_id is not None and run_id != self._run_id:
                return
            thread, signal = self._thread, self._signal
            assert thread is not None and signal is not None
            self._state = TaskState.STOPPING
            signal.cancel()
            if thread is current_thread():
                # Torn down from inside the body: nothing to join, close the run now.
                logger.debug("Task %s stopped from its own thread", self.name)
                self._end_run()
                self._clear_run_locked()
                return

        thread.join()

        with self._lock:
            self._clear_run_locked()
        logger.debug("Task %s stopped", self.name, extra={"task": self.name})

    def _clear_run_locked(self) -> None:
        self._thread = None
        self._signal = None
        self._run_id = None
        self._state = TaskState.IDLE
        self._state_changed.notify_all()

    def _execute(self, run_id: str, signal: CancellationSignal) -> None:
        try:
            self._publish(TaskStarted(run_id=run_id, name=self.name))
            outcome = self._invoke_body(run_id, signal)
            self._publish(outcome)
        finally:
            self._finish_run()

    def _invoke_body(self, run_id: str, signal: CancellationSignal) -> RunOutcome:
        extra = {"task": self.name, "run_id": run_id}
        try:
            self.execute_body(signal)
        except CancelledError:
            signal.mark_fired()
            logger.debug("Task %s cancelled", self.name, extra=extra)
            return TaskCancelled(run_id=run_id, name=self.name)
        except Exception as e:
            self._last_error = e
            logger.exception("Task %s failed", self.name, extra=extra)
            return TaskFailed(run_id=run_id, name=self.name, error=str(e))

        if signal.requested:
            signal.mark_fired()
            logger.debug("Task %s exited after cancellation", self.name, extra=extra)
            return TaskCancelled(run_id=run_id, name=self.name)
        logger.debug("Task %s completed", self.name, extra=extra)
        return TaskCompleted(run_id=run_id, name=self.name)

    def _finish_run(self) -> None:
        with self._lock:
            if self._thread is not current_thread():
                # Already closed by _stop() called from inside the body.
                return
            self._end_run()
            if self._state is TaskState.RUNNING:
                self._clear_run_locked()
            # STOPPING: the stopper is joining this thread and clears the handle.

    def _publish(self, event: object) -> None:
        if self._bus is not None:
            self._bus.publish(event)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, state={self._state.value})"
