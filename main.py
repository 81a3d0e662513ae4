"""
Demo entry point for the task helpers.

Run: python main.py [--config settings.yaml] [--duration-ms 3000]

Runs the summation sample with a bounded wait, then a periodic task with a
logging observer for the requested duration, and disposes both.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from taskhelper.config import load_settings
from taskhelper.core.errors import ValidationError
from taskhelper.core.events import TASK_EVENTS, EventBus, TaskFailed, TaskTimedOut
from taskhelper.core.observability.logging_config import setup_logging
from taskhelper.core.tasks import PeriodicTaskWrapper
from taskhelper.samples import SumTask

logger = logging.getLogger("taskhelper.demo")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the task helper samples.")
    parser.add_argument("--config", type=Path, default=None, help="YAML settings file")
    parser.add_argument(
        "--duration-ms", type=int, default=None, help="how long to let the periodic task run"
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    try:
        settings = load_settings(args.config)
    except ValidationError as e:
        print(f"Invalid settings: {e}", file=sys.stderr)
        return 2

    setup_logging(level=settings.log_level, json_logs=settings.json_logs, log_dir=settings.log_dir)

    bus = EventBus()
    bus.subscribe_many(
        TASK_EVENTS,
        lambda e: logger.debug(
            "%s: %s", type(e).__name__, e.name, extra={"task": e.name, "run_id": e.run_id}
        ),
    )
    bus.subscribe(TaskFailed, lambda e: logger.error("%s failed: %s", e.name, e.error))
    bus.subscribe(TaskTimedOut, lambda e: logger.info("%s torn down after %dms", e.name, e.timeout_ms))

    with SumTask(range(1, 10), event_bus=bus) as summation:
        summation.run()
        if not summation.wait(settings.wait_timeout_ms):
            logger.error("Summation did not finish within %dms", settings.wait_timeout_ms)
            return 1
        logger.info("Sum of %s = %d", summation.input, summation.output)

    duration_ms = args.duration_ms if args.duration_ms is not None else settings.wait_timeout_ms
    with PeriodicTaskWrapper(
        interval_ms=settings.interval_ms, name="heartbeat", event_bus=bus
    ) as heartbeat:
        heartbeat.task_iteration.subscribe(
            lambda: logger.info("tick %d", heartbeat.counter, extra={"iteration": heartbeat.counter})
        )
        heartbeat.run()
        heartbeat.wait(duration_ms, force_cancel_on_timeout=True)
        logger.info("Heartbeat ticked %d times in %dms", heartbeat.counter, duration_ms)

    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(0)
