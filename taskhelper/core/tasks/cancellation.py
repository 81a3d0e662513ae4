from __future__ import annotations

from threading import TIMEOUT_MAX, Event

from taskhelper.core.errors import CancelledError


class CancellationSignal:
    """Cooperative, one-shot cancellation flag for a single task run.

    ``requested`` flips to True once and never back. ``fired`` records that
    the task's thread has seen the request and is winding down.
    """

    def __init__(self) -> None:
        self._evt = Event()
        self._fired = False

    def cancel(self) -> None:
        self._evt.set()

    @property
    def requested(self) -> bool:
        return self._evt.is_set()

    @property
    def fired(self) -> bool:
        return self._fired

    def is_cancelled(self) -> bool:
        if self._evt.is_set():
            self._fired = True
            return True
        return False

    def raise_if_cancelled(self) -> None:
        if self.is_cancelled():
            raise CancelledError("Task cancelled")

    def sleep(self, seconds: float) -> bool:
        """Sleep up to ``seconds``, waking early on cancellation.

        Returns True when cancellation was requested before or during the sleep.
        Durations beyond the platform timer limit are capped at that limit.
        """
        if self.is_cancelled():
            return True
        self._evt.wait(min(max(0.0, seconds), TIMEOUT_MAX))
        return self.is_cancelled()

    def mark_fired(self) -> None:
        if self._evt.is_set():
            self._fired = True
