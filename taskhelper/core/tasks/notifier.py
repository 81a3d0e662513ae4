from __future__ import annotations

import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass
from threading import RLock

logger = logging.getLogger(__name__)

IterationCallback = Callable[[], None]


@dataclass(frozen=True, slots=True)
class Observer:
    """Handle returned by ``IterationNotifier.subscribe``."""

    observer_id: int
    callback: IterationCallback


class IterationNotifier:
    """Ordered set of zero-argument observers called once per iteration.

    Observers run synchronously on the notifying thread, in subscription
    order. An observer that raises is logged and skipped; the rest still run.
    """

    def __init__(self, name: str = "") -> None:
        self._name = name
        self._lock = RLock()
        self._ids = itertools.count(1)
        self._observers: list[Observer] = []

    def subscribe(self, callback: IterationCallback) -> Observer:
        with self._lock:
            observer = Observer(observer_id=next(self._ids), callback=callback)
            self._observers.append(observer)
        return observer

    def unsubscribe(self, observer: Observer) -> None:
        with self._lock:
            try:
                self._observers.remove(observer)
            except ValueError:
                return

    def notify(self) -> None:
        # Copy under lock so observers may (un)subscribe while being notified.
        with self._lock:
            observers = list(self._observers)
        for observer in observers:
            try:
                observer.callback()
            except Exception:
                logger.exception(
                    "Iteration observer failed",
                    extra={"task": self._name, "event": "iteration_observer"},
                )

    def clear(self) -> None:
        with self._lock:
            self._observers.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._observers)
