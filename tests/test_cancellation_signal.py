from __future__ import annotations

import threading
import time

import pytest

from taskhelper.core.errors import CancelledError
from taskhelper.core.tasks import CancellationSignal


def test_signal_is_one_shot_and_monotonic() -> None:
    signal = CancellationSignal()
    assert signal.requested is False
    assert signal.fired is False

    signal.cancel()
    signal.cancel()

    assert signal.requested is True
    # Nobody observed it yet.
    assert signal.fired is False
    assert signal.is_cancelled() is True
    assert signal.fired is True
    assert signal.requested is True


def test_raise_if_cancelled() -> None:
    signal = CancellationSignal()
    signal.raise_if_cancelled()

    signal.cancel()
    with pytest.raises(CancelledError):
        signal.raise_if_cancelled()
    assert signal.fired is True


def test_sleep_returns_false_when_not_cancelled() -> None:
    signal = CancellationSignal()
    assert signal.sleep(0.01) is False
    assert signal.sleep(-1.0) is False


def test_sleep_wakes_early_on_cancel() -> None:
    signal = CancellationSignal()
    threading.Timer(0.05, signal.cancel).start()

    start = time.monotonic()
    assert signal.sleep(5.0) is True
    assert time.monotonic() - start < 2.0


def test_sleep_checks_at_entry() -> None:
    signal = CancellationSignal()
    signal.cancel()

    start = time.monotonic()
    assert signal.sleep(5.0) is True
    assert time.monotonic() - start < 0.5


def test_sleep_longer_than_timer_limit_still_wakes_on_cancel() -> None:
    signal = CancellationSignal()
    threading.Timer(0.05, signal.cancel).start()

    start = time.monotonic()
    assert signal.sleep(threading.TIMEOUT_MAX * 10) is True
    assert time.monotonic() - start < 2.0
