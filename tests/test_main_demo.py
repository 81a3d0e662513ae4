from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

import main


@pytest.fixture
def restore_root_logging() -> Iterator[None]:
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_demo_runs_and_exits_cleanly(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, restore_root_logging: None
) -> None:
    monkeypatch.delenv("TASKHELPER_LOG_DIR", raising=False)
    cfg = tmp_path / "settings.yaml"
    cfg.write_text("interval_ms: 20\nwait_timeout_ms: 2000\n", encoding="utf-8")

    assert main.main(["--config", str(cfg), "--duration-ms", "150"]) == 0


def test_demo_rejects_bad_settings(tmp_path: Path, restore_root_logging: None) -> None:
    cfg = tmp_path / "settings.yaml"
    cfg.write_text("interval_ms: 0\n", encoding="utf-8")

    assert main.main(["--config", str(cfg)]) == 2
