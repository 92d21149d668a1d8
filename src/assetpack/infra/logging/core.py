from __future__ import annotations

"""
Logging Setup for the assetpack CLI.

Two sinks exist: the console (stderr, always on) and an optional rotating
log file requested with ``--log-file``. Both sit behind a single
QueueHandler on the root logger and are drained by a QueueListener thread,
so compile workers never block on terminal or disk I/O. In debug mode the
console lines name the emitting thread, which tells parallel
``compile-folders`` workers apart.
"""

import atexit
import logging
import os
import queue
import sys
from dataclasses import dataclass
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from typing import List, Optional

_CONFIGURED_FLAG_ATTR: str = "_assetpack_configured"
_QUEUE_LISTENER_ATTR: str = "_assetpack_queue_listener"
_HANDLER_TAG_ATTR: str = "_assetpack_handler"

CONSOLE_FORMAT = "%(levelname)s | %(message)s"
DEBUG_CONSOLE_FORMAT = "%(levelname)s | %(threadName)s | %(name)s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)s | %(threadName)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class LoggingConfig:
    """
    Logging options exposed on the command line.

    Attributes:
        debug: ``--debug``; lowers the threshold to DEBUG and switches the
               console to the thread-aware format.
        log_file: ``--log-file``; extra rotating file sink.
        max_bytes: Size of one log file segment before it rotates.
        backup_count: Rotated segments kept next to the live file.
    """
    debug: bool = False
    log_file: Optional[str] = None
    max_bytes: int = 512 * 1024
    backup_count: int = 2

    @property
    def level(self) -> int:
        return logging.DEBUG if self.debug else logging.INFO


# ==============================================================================
# PUBLIC API
# ==============================================================================

def configure_logging(cfg: LoggingConfig, *, force: bool = False) -> logging.Logger:
    """
    Install the queue-backed sinks on the root logger.

    Only the first call has an effect unless ``force`` is set; a forced
    call tears down what an earlier call installed and leaves handlers
    owned by anyone else (pytest, an embedding program) in place.

    Returns:
        logging.Logger: The root logger.
    """
    root = logging.getLogger()
    if getattr(root, _CONFIGURED_FLAG_ATTR, False) and not force:
        return root

    _detach(root)
    root.setLevel(cfg.level)

    sinks: List[logging.Handler] = [_console_sink(cfg)]
    file_sink = _file_sink(cfg)
    if file_sink is not None:
        sinks.append(file_sink)

    records: queue.SimpleQueue[logging.LogRecord] = queue.SimpleQueue()
    entry = QueueHandler(records)
    setattr(entry, _HANDLER_TAG_ATTR, True)

    listener = QueueListener(records, *sinks, respect_handler_level=True)
    listener.start()
    atexit.register(_stop_listener, listener)

    root.addHandler(entry)
    setattr(root, _QUEUE_LISTENER_ATTR, listener)
    setattr(root, _CONFIGURED_FLAG_ATTR, True)
    return root


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


# ==============================================================================
# SINKS
# ==============================================================================

def _console_sink(cfg: LoggingConfig) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(cfg.level)
    handler.setFormatter(logging.Formatter(DEBUG_CONSOLE_FORMAT if cfg.debug else CONSOLE_FORMAT))
    return handler


def _file_sink(cfg: LoggingConfig) -> Optional[logging.Handler]:
    """
    Open the rotating log file, creating its folder when needed.

    An unusable path is reported on stderr and skipped: a bad ``--log-file``
    must not stop a compilation.
    """
    if not cfg.log_file:
        return None

    try:
        parent = os.path.dirname(os.path.abspath(cfg.log_file))
        os.makedirs(parent, exist_ok=True)
        handler = RotatingFileHandler(
            cfg.log_file,
            maxBytes=cfg.max_bytes,
            backupCount=cfg.backup_count,
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"WARNING: Cannot open log file '{cfg.log_file}': {e}\n")
        return None

    handler.setLevel(cfg.level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    return handler


# ==============================================================================
# TEARDOWN
# ==============================================================================

def _detach(root: logging.Logger) -> None:
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_TAG_ATTR, False):
            root.removeHandler(handler)
            handler.close()

    _stop_listener(getattr(root, _QUEUE_LISTENER_ATTR, None))
    setattr(root, _QUEUE_LISTENER_ATTR, None)


def _stop_listener(listener: Optional[QueueListener]) -> None:
    """Flush and stop a listener; a second stop (atexit after a reset) is a no-op."""
    if listener is not None and getattr(listener, "_thread", None) is not None:
        listener.stop()
        for sink in listener.handlers:
            sink.close()
