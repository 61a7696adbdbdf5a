"""Environment variable overrides for listener options."""

import os
from typing import Dict, Optional, Tuple

from .exceptions import ConfigurationError
from .notifier import LOGIN_NAME, LOGIN_PASSWORD, ZENDESK_URL

# Environment variable -> listener option it overrides
ENVIRONMENT_OPTIONS = {
    "ZENDESK_URL": ZENDESK_URL,
    "ZENDESK_LOGIN_NAME": LOGIN_NAME,
    "ZENDESK_LOGIN_PASSWORD": LOGIN_PASSWORD,
}

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def load_environment_options() -> Dict[str, str]:
    """
    Collect listener options supplied through environment variables.

    Supported variables:
    - ZENDESK_URL: overrides the ZendeskUrl option
    - ZENDESK_LOGIN_NAME / ZENDESK_LOGIN_PASSWORD: override the login pair

    Returns:
        Option name -> value for every variable that is set and non-empty

    Raises:
        ConfigurationError: If only one half of the login pair is set
    """
    options = {}
    for variable, option in ENVIRONMENT_OPTIONS.items():
        value = os.getenv(variable)
        if value:
            options[option] = value

    if (LOGIN_NAME in options) != (LOGIN_PASSWORD in options):
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=[
                "ZENDESK_LOGIN_NAME and ZENDESK_LOGIN_PASSWORD must both be set, or neither"
            ],
            suggestions=["Copy .env.example to .env and fill in both credentials"],
        )

    return options


def load_tracker_auth() -> Optional[Tuple[str, str]]:
    """Basic auth for downloading attachments from the tracker.

    Read from TRACKER_LOGIN_NAME and TRACKER_LOGIN_PASSWORD; None when unset.
    """
    login = os.getenv("TRACKER_LOGIN_NAME")
    password = os.getenv("TRACKER_LOGIN_PASSWORD")
    if login and password:
        return (login, password)
    if login or password:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=[
                "TRACKER_LOGIN_NAME and TRACKER_LOGIN_PASSWORD must both be set, or neither"
            ],
        )
    return None


def load_log_level_override() -> Optional[str]:
    """Return LOG_LEVEL from the environment, validated, or None."""
    log_level = os.getenv("LOG_LEVEL")
    if not log_level:
        return None
    if log_level.upper() not in VALID_LOG_LEVELS:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=[
                f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
            ],
        )
    return log_level.upper()
