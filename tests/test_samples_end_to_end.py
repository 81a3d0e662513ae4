from __future__ import annotations

import time

from taskhelper.samples import CopyTask, SpinTask, SumTask

WORDS = ["one", "two", "three", "four", "five"]


def test_copy_task_after_delay() -> None:
    task = CopyTask(WORDS)
    task.run()
    time.sleep(0.5)

    assert task.output == WORDS
    task.dispose()


def test_sum_task_after_delay() -> None:
    task = SumTask(range(1, 10))
    task.run()
    time.sleep(0.5)

    assert task.output == 45
    task.dispose()


def test_copy_task_with_wait() -> None:
    task = CopyTask(WORDS)
    task.run()
    task.wait()

    assert task.output == WORDS
    task.dispose()


def test_sum_task_with_wait_timeout() -> None:
    task = SumTask([1, 2, 3, 4, 5, 6, 7, 8, 9])
    task.run()

    assert task.wait(3000) is True
    assert task.output == 45
    task.dispose()


def test_output_is_produced_exactly_once() -> None:
    task = CopyTask(WORDS)
    task.run()
    task.run()
    assert task.wait(3000) is True
    assert task.output == WORDS

    task.run()  # a fresh run after completion starts from an empty output
    assert task.wait(3000) is True

    assert task.output == WORDS
    task.dispose()


def test_spin_task_times_out() -> None:
    task = SpinTask()
    task.run()

    assert task.wait(3000) is False
    task.dispose()
    assert not task.running


def test_spin_task_forced_cancellation() -> None:
    task = SpinTask()
    task.run()

    assert task.wait(3000, True) is False
    assert not task.running  # task should have been torn down
    task.dispose()
