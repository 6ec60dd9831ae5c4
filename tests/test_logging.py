"""Tests for the logging setup helper."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from docwright.utils import logging as logging_utils


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)
    logging_utils._CONFIGURED = False
    logging_utils._LOG_PATH = None


def test_setup_logging_writes_rotating_file(tmp_path: Path) -> None:
    path = logging_utils.setup_logging(logging.DEBUG, log_dir=tmp_path, console=False, force=True)

    logging.getLogger("docwright.test").info("hello log")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert path == tmp_path / "docwright.log"
    assert "hello log" in path.read_text(encoding="utf-8")
    assert logging_utils.get_log_path() == path


def test_env_override_and_idempotence(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DOCWRIGHT_LOG_DIR", str(tmp_path / "env-logs"))

    first = logging_utils.setup_logging("info", console=False, force=True)
    second = logging_utils.setup_logging(logging.DEBUG, log_dir=tmp_path / "elsewhere")

    assert first == tmp_path / "env-logs" / "docwright.log"
    assert second == first


def test_noisy_loggers_are_quieted(tmp_path: Path) -> None:
    logging_utils.setup_logging(logging.DEBUG, log_dir=tmp_path, console=False, force=True)

    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("openai").level == logging.WARNING


def test_unknown_level_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        logging_utils.setup_logging("chatty", log_dir=tmp_path, console=False, force=True)
