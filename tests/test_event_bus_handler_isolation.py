from __future__ import annotations

import logging
from dataclasses import dataclass

import pytest

from taskhelper.core.events import TASK_EVENTS, TaskCompleted, TaskStarted
from taskhelper.core.events.event_bus import EventBus


@dataclass(frozen=True)
class _Evt:
    value: int


def test_publish_continues_when_one_handler_raises() -> None:
    bus = EventBus()
    received: list[int] = []

    def broken(_evt: _Evt) -> None:
        raise RuntimeError("boom")

    def healthy(evt: _Evt) -> None:
        received.append(evt.value)

    bus.subscribe(_Evt, broken)
    bus.subscribe(_Evt, healthy)

    bus.publish(_Evt(7))

    assert received == [7]


def test_unsubscribe_stops_delivery() -> None:
    bus = EventBus()
    received: list[int] = []

    sub = bus.subscribe(_Evt, lambda e: received.append(e.value))
    bus.publish(_Evt(1))
    bus.unsubscribe(sub)
    bus.unsubscribe(sub)
    bus.publish(_Evt(2))

    assert received == [1]


def test_clear_drops_all_handlers() -> None:
    bus = EventBus()
    received: list[int] = []
    bus.subscribe(_Evt, lambda e: received.append(e.value))

    bus.clear()
    bus.publish(_Evt(3))

    assert received == []


def test_subscribe_many_covers_every_task_event() -> None:
    bus = EventBus()
    received: list[object] = []

    subs = bus.subscribe_many(TASK_EVENTS, received.append)
    bus.publish(TaskStarted(run_id="r1", name="copy"))
    bus.publish(TaskCompleted(run_id="r1", name="copy"))
    for sub in subs:
        bus.unsubscribe(sub)
    bus.publish(TaskStarted(run_id="r2", name="copy"))

    assert len(subs) == len(TASK_EVENTS)
    assert [type(e) for e in received] == [TaskStarted, TaskCompleted]


def test_handler_failure_is_logged_with_task_context(caplog: pytest.LogCaptureFixture) -> None:
    bus = EventBus()

    def broken(_evt: TaskStarted) -> None:
        raise RuntimeError("boom")

    bus.subscribe(TaskStarted, broken)
    with caplog.at_level(logging.ERROR, logger="taskhelper.core.events.event_bus"):
        bus.publish(TaskStarted(run_id="r1", name="copy"))

    [record] = [r for r in caplog.records if r.getMessage() == "Event handler failed"]
    assert record.event == "TaskStarted"
    assert record.task == "copy"
    assert record.run_id == "r1"
