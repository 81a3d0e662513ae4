"""Periodic tasks.

``TickLoop`` owns the schedule and the iteration counter; ``PeriodicTaskWrapper``
drives one on its background thread and exposes the interval, the counter and
the per-iteration notifier.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from threading import Lock

from taskhelper import config
from taskhelper.core.errors import ValidationError
from taskhelper.core.events import EventBus

from .cancellation import CancellationSignal
from .notifier import IterationNotifier
from .waitable import WaitableTaskWrapper

logger = logging.getLogger(__name__)

IterationFn = Callable[[CancellationSignal], None]


def _check_interval(interval_ms: int) -> int:
    if isinstance(interval_ms, bool) or not isinstance(interval_ms, int):
        raise ValidationError(f"interval_ms must be an int, got {interval_ms!r}")
    if interval_ms <= 0:
        raise ValidationError(f"interval_ms must be > 0, got {interval_ms}")
    if interval_ms > config.MAX_WAIT_MS:
        raise ValidationError(f"interval_ms must be <= {config.MAX_WAIT_MS}, got {interval_ms}")
    return interval_ms


def _check_delay(delay_ms: int) -> int:
    if isinstance(delay_ms, bool) or not isinstance(delay_ms, int):
        raise ValidationError(f"initial_delay_ms must be an int, got {delay_ms!r}")
    if delay_ms < 0:
        raise ValidationError(f"initial_delay_ms must be >= 0, got {delay_ms}")
    if delay_ms > config.MAX_WAIT_MS:
        raise ValidationError(
            f"initial_delay_ms must be <= {config.MAX_WAIT_MS}, got {delay_ms}"
        )
    return delay_ms


class TickLoop:
    """Fixed-rate loop: sleep until due, run one iteration, count, notify.

    The first iteration is due ``initial_delay_ms`` after loop start (0 by
    default, i.e. at once), then every ``interval_ms``. Due times are anchored
    at loop start so iterations do not drift. The interval is re-read after
    every iteration. If an iteration overruns its slot the next one starts
    immediately, without bursting to catch up.
    """

    def __init__(self, interval_ms: int, *, initial_delay_ms: int = 0) -> None:
        self._interval_ms = _check_interval(interval_ms)
        self._initial_delay_ms = _check_delay(initial_delay_ms)
        self._count = 0
        self._count_lock = Lock()

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    @interval_ms.setter
    def interval_ms(self, value: int) -> None:
        self._interval_ms = _check_interval(value)

    @property
    def initial_delay_ms(self) -> int:
        return self._initial_delay_ms

    @initial_delay_ms.setter
    def initial_delay_ms(self, value: int) -> None:
        self._initial_delay_ms = _check_delay(value)

    @property
    def count(self) -> int:
        with self._count_lock:
            return self._count

    def run(
        self,
        signal: CancellationSignal,
        iteration: IterationFn,
        notifier: IterationNotifier,
    ) -> None:
        next_due = time.monotonic() + self._initial_delay_ms / 1000.0

        while True:
            if signal.sleep(next_due - time.monotonic()):
                return
            iteration(signal)
            with self._count_lock:
                self._count += 1
            notifier.notify()
            next_due = max(next_due + self._interval_ms / 1000.0, time.monotonic())


class PeriodicTaskWrapper(WaitableTaskWrapper):
    """Re-runs a single iteration every ``interval_ms`` until cancelled.

    Provide the iteration by passing ``iteration=`` or overriding
    ``execute_iteration``. Subscribe to ``task_iteration`` for a zero-argument
    callback after every iteration. An iteration that raises (other than a
    cancellation) ends the run; a failing observer does not.
    """

    def __init__(
        self,
        iteration: IterationFn | None = None,
        *,
        interval_ms: int = config.DEFAULT_INTERVAL_MS,
        initial_delay_ms: int = 0,
        name: str | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        super().__init__(name=name, event_bus=event_bus)
        self._iteration = iteration
        self._loop = TickLoop(interval_ms, initial_delay_ms=initial_delay_ms)
        self.task_iteration = IterationNotifier(self.name)

    @property
    def interval_ms(self) -> int:
        return self._loop.interval_ms

    @interval_ms.setter
    def interval_ms(self, value: int) -> None:
        self._loop.interval_ms = value

    @property
    def initial_delay_ms(self) -> int:
        return self._loop.initial_delay_ms

    @initial_delay_ms.setter
    def initial_delay_ms(self, value: int) -> None:
        self._loop.initial_delay_ms = value

    @property
    def counter(self) -> int:
        """Number of completed iterations across all runs of this wrapper."""
        return self._loop.count

    def execute_iteration(self, signal: CancellationSignal) -> None:
        if self._iteration is not None:
            self._iteration(signal)

    def execute_body(self, signal: CancellationSignal) -> None:
        logger.debug(
            "Periodic task %s ticking every %dms",
            self.name,
            self._loop.interval_ms,
            extra={"task": self.name},
        )
        self._loop.run(signal, self.execute_iteration, self.task_iteration)

    def dispose_managed(self) -> None:
        self.task_iteration.clear()
