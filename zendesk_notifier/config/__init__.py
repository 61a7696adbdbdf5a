"""Configuration management module for Zendesk Notifier."""

from .environment import (
    load_environment_options,
    load_log_level_override,
    load_tracker_auth,
)
from .exceptions import ConfigurationError
from .loader import load_config
from .models import (
    AppConfig,
    LogFormat,
    LogLevel,
    LoggingConfig,
    NotificationPolicy,
    ServerConfiguration,
    TransportConfig,
)
from .notifier import (
    ACCEPTED_OPTIONS,
    ConfigurationSnapshot,
    NotifierConfiguration,
)

__all__ = [
    # Loading
    "load_config",
    "load_environment_options",
    "load_log_level_override",
    "load_tracker_auth",
    # Models
    "AppConfig",
    "LoggingConfig",
    "TransportConfig",
    "ServerConfiguration",
    "NotificationPolicy",
    # Runtime configuration
    "NotifierConfiguration",
    "ConfigurationSnapshot",
    "ACCEPTED_OPTIONS",
    # Enums
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]
