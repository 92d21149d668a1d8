from __future__ import annotations

"""
Integration tests for Logging Infrastructure.

Verifies the QueueListener architecture, idempotency of configuration,
the debug console format and the optional rotating log file.
"""

import logging
import time
from logging.handlers import QueueListener, RotatingFileHandler
from pathlib import Path
from typing import Iterator

import pytest

from assetpack.infra.logging import (
    LoggingConfig,
    _CONFIGURED_FLAG_ATTR,
    _HANDLER_TAG_ATTR,
    _QUEUE_LISTENER_ATTR,
    configure_logging,
)


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Clean up the handlers this package installs, before and after each test."""
    _reset_root()
    yield
    _reset_root()


def _reset_root() -> None:
    root = logging.getLogger()

    listener = getattr(root, _QUEUE_LISTENER_ATTR, None)
    if isinstance(listener, QueueListener) and getattr(listener, "_thread", None):
        listener.stop()
    setattr(root, _QUEUE_LISTENER_ATTR, None)

    for h in list(root.handlers):
        if getattr(h, _HANDLER_TAG_ATTR, False):
            root.removeHandler(h)
            h.close()

    if hasattr(root, _CONFIGURED_FLAG_ATTR):
        delattr(root, _CONFIGURED_FLAG_ATTR)


def _listener() -> QueueListener:
    return getattr(logging.getLogger(), _QUEUE_LISTENER_ATTR)


def test_logging_idempotency() -> None:
    """TC-01: Repeated calls do not duplicate handlers; force re-applies settings."""
    configure_logging(LoggingConfig())
    root = logging.getLogger()
    initial_handler_count = len(root.handlers)
    first_listener = _listener()

    configure_logging(LoggingConfig(debug=True))
    assert len(root.handlers) == initial_handler_count, "Handlers were duplicated."
    assert root.level == logging.INFO
    assert _listener() is first_listener

    configure_logging(LoggingConfig(debug=True), force=True)
    assert len(root.handlers) == initial_handler_count
    assert root.level == logging.DEBUG
    assert _listener() is not first_listener


def test_single_queue_handler_on_root() -> None:
    """TC-02: The root logger only gets one tagged QueueHandler."""
    configure_logging(LoggingConfig())

    root = logging.getLogger()
    ours = [h for h in root.handlers if getattr(h, _HANDLER_TAG_ATTR, False)]

    assert len(ours) == 1
    assert _listener() is not None


def test_debug_console_names_the_thread() -> None:
    """TC-03: Debug output identifies parallel compile workers."""
    configure_logging(LoggingConfig(debug=True))
    console = _listener().handlers[0]

    record = logging.LogRecord("assetpack.core", logging.DEBUG, __file__, 1, "building", None, None)
    record.threadName = "CompileWorker_0"

    assert console.level == logging.DEBUG
    assert console.format(record) == "DEBUG | CompileWorker_0 | assetpack.core | building"


def test_default_console_is_terse() -> None:
    configure_logging(LoggingConfig())
    console = _listener().handlers[0]

    record = logging.LogRecord("assetpack.core", logging.INFO, __file__, 1, "done", None, None)

    assert console.format(record) == "INFO | done"
    assert len(_listener().handlers) == 1


def test_log_file_rotation(tmp_path: Path) -> None:
    """TC-04: The --log-file sink rotates once the size limit is exceeded."""
    log_file = tmp_path / "logs" / "assetpack.log"
    configure_logging(LoggingConfig(debug=True, log_file=str(log_file), max_bytes=100, backup_count=1))

    assert isinstance(_listener().handlers[1], RotatingFileHandler)

    logger = logging.getLogger("test_rotate")
    for _ in range(10):
        logger.debug("This is a long log message to trigger rotation." * 5)

    # Give time for the QueueListener to process
    time.sleep(0.5)

    assert log_file.exists()
    assert (tmp_path / "logs" / "assetpack.log.1").exists(), "Rotation backup file was not created."


def test_unopenable_log_file_falls_back_to_console(tmp_path: Path, capsys) -> None:
    """TC-05: A log file that cannot be opened does not abort configuration."""
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a folder", encoding="utf-8")

    root = configure_logging(LoggingConfig(log_file=str(blocker / "x.log")))

    assert getattr(root, _CONFIGURED_FLAG_ATTR, False) is True
    assert len(_listener().handlers) == 1
    assert "Cannot open log file" in capsys.readouterr().err
