"""Sample payloads.

Trivial bodies used by the tests and by ``main.py`` to exercise the lifecycle
contract: copy strings, sum integers, spin until cancelled.
"""

from __future__ import annotations

from collections.abc import Iterable

from taskhelper.core.events import EventBus
from taskhelper.core.tasks import CancellationSignal, WaitableTaskWrapper


class CopyTask(WaitableTaskWrapper):
    """Copies ``input`` to ``output`` in order, one item per cancellation check."""

    def __init__(
        self,
        items: Iterable[str] = (),
        *,
        name: str | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        super().__init__(name=name, event_bus=event_bus)
        self.input: list[str] = list(items)
        self.output: list[str] = []

    def execute_body(self, signal: CancellationSignal) -> None:
        self.output = []
        for item in self.input:
            signal.raise_if_cancelled()
            self.output.append(item)


class SumTask(WaitableTaskWrapper):
    def __init__(
        self,
        numbers: Iterable[int] = (),
        *,
        name: str | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        super().__init__(name=name, event_bus=event_bus)
        self.input: list[int] = list(numbers)
        self.output = 0

    def execute_body(self, signal: CancellationSignal) -> None:
        total = 0
        for n in self.input:
            signal.raise_if_cancelled()
            total += n
        self.output = total


class SpinTask(WaitableTaskWrapper):
    """Never finishes on its own; exits only when cancelled."""

    poll_interval_sec = 0.01

    def execute_body(self, signal: CancellationSignal) -> None:
        while not signal.sleep(self.poll_interval_sec):
            pass
