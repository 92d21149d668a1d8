from __future__ import annotations

from .core import (
    _CONFIGURED_FLAG_ATTR,
    _HANDLER_TAG_ATTR,
    _QUEUE_LISTENER_ATTR,
    LoggingConfig,
    configure_logging,
    get_logger,
)

__all__ = [
    "LoggingConfig",
    "configure_logging",
    "get_logger",
    "_CONFIGURED_FLAG_ATTR",
    "_HANDLER_TAG_ATTR",
    "_QUEUE_LISTENER_ATTR",
]
