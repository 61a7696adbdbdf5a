"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field, SecretStr, field_validator, model_validator

DEFAULT_TICKET_FIELD_NAME = "Zendesk TicketID"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class ServerConfiguration(BaseModel):
    """Zendesk endpoint and credentials.

    Instances are immutable; an update builds a new instance, so a reader
    holding a reference never observes a half-applied change.
    """

    url: Optional[str] = Field(None, description="Base URL of the Zendesk application")
    login_name: Optional[str] = Field(None, description="Zendesk login (agent email)")
    login_password: Optional[SecretStr] = Field(None, description="Zendesk password or API token")
    keystore_password: Optional[SecretStr] = Field(
        None, description="Trust store passphrase for https endpoints"
    )

    model_config = {"frozen": True}

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        """Require an absolute http(s) URL with a host."""
        if v is None:
            return None
        stripped = v.strip()
        parsed = urlparse(stripped)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"Not a valid http(s) URL: '{v}'")
        return stripped.rstrip("/")

    @model_validator(mode="after")
    def validate_credentials_pair(self):
        """Credentials are set as a pair or not at all."""
        if (self.login_name is None) != (self.login_password is None):
            raise ValueError("login_name and login_password must be set together")
        return self

    @property
    def has_credentials(self) -> bool:
        return self.login_name is not None and self.login_password is not None

    def auth(self) -> Optional[tuple[str, str]]:
        """Basic auth tuple for requests, or None when no credentials are set."""
        if not self.has_credentials:
            return None
        return (self.login_name, self.login_password.get_secret_value())


class NotificationPolicy(BaseModel):
    """Cross-event dispatch policy."""

    ticket_field_name: str = Field(
        DEFAULT_TICKET_FIELD_NAME,
        min_length=1,
        description="Tracker field holding the linked Zendesk ticket ID",
    )
    suppressed_actor: Optional[str] = Field(
        None, description="Tracker user whose edits never trigger notifications"
    )
    public_comments: bool = Field(True, description="Post comments as public")
    upload_attachments: bool = Field(True, description="Upload new attachments to Zendesk")
    field_mappings: Dict[str, str] = Field(
        default_factory=dict,
        description="Tracker field name -> Zendesk ticket attribute",
    )

    model_config = {"frozen": True}

    @field_validator("field_mappings")
    @classmethod
    def normalize_mappings(cls, v: Dict[str, str]) -> Dict[str, str]:
        """Lower-case tracker field names; reject blank attribute names."""
        normalized = {}
        for field_name, attribute in v.items():
            key = field_name.strip().casefold()
            value = attribute.strip()
            if not key or not value:
                raise ValueError(f"Invalid field mapping: '{field_name}' -> '{attribute}'")
            normalized[key] = value
        return normalized

    def is_ticket_field(self, field_name: str) -> bool:
        return field_name.strip().casefold() == self.ticket_field_name.strip().casefold()

    def mapped_attribute(self, field_name: str) -> Optional[str]:
        return self.field_mappings.get(field_name.strip().casefold())


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class TransportConfig(BaseModel):
    """HTTP settings for talking to Zendesk and the tracker."""

    timeout: int = Field(30, ge=5, le=300, description="Request timeout (seconds)")
    user_agent: str = Field(
        "ZendeskNotifier/1.0",
        min_length=1,
        description="User-Agent string for HTTP requests",
    )

    @field_validator("user_agent")
    @classmethod
    def strip_user_agent(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("user_agent cannot be empty")
        return stripped


class AppConfig(BaseModel):
    """Root configuration object loaded from config.yaml."""

    options: Dict[str, str] = Field(
        default_factory=dict,
        description="Listener options, keyed by the tracker's option names",
    )
    field_mappings: Dict[str, str] = Field(
        default_factory=dict,
        description="Tracker field name -> Zendesk ticket attribute",
    )
    tracker_name: str = Field("JIRA", min_length=1, description="Tracker name used in comments")
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    transport: TransportConfig = Field(
        default_factory=TransportConfig, description="HTTP transport settings"
    )

    @field_validator("options", mode="before")
    @classmethod
    def stringify_options(cls, v: Any) -> Any:
        """YAML turns `false` into a bool; options are plain strings."""
        if not isinstance(v, dict):
            return v
        stringified = {}
        for key, value in v.items():
            if value is None:
                continue
            if isinstance(value, bool):
                value = "true" if value else "false"
            stringified[str(key)] = str(value)
        return stringified
