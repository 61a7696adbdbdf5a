"""Structured logging helpers shared by all notifier components."""

import logging
from typing import Optional

from .config import STANDARD_ATTRS, configure_logging
from .context import get_log_context, log_context

__all__ = [
    "ComponentLoggerAdapter",
    "configure_logging",
    "get_log_context",
    "get_logger",
    "log_context",
]


class ComponentLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that merges its component field with per-call extras.

    Extra keys that clash with a LogRecord attribute (`filename`, `name`,
    `module`, ...) would make the logging call raise, so they are emitted
    as `<key>_field` instead.
    """

    def process(self, msg, kwargs):
        # Call-site extras take precedence over the adapter's defaults
        merged = {**self.extra, **kwargs.get("extra", {})}
        kwargs["extra"] = {
            (f"{key}_field" if key in STANDARD_ATTRS else key): value
            for key, value in merged.items()
        }
        return msg, kwargs


def get_logger(name: str, component: Optional[str] = None):
    """Get a logger with an optional default component field.

    Args:
        name: Logger name (typically __name__)
        component: Component identifier injected into every record

    Returns:
        Logger or ComponentLoggerAdapter instance

    Example:
        >>> logger = get_logger(__name__, component="dispatcher")
        >>> logger.info("Event filtered", extra={"event": "notification.filtered"})
    """
    logger = logging.getLogger(name)

    if component:
        return ComponentLoggerAdapter(logger, {"component": component})

    return logger
