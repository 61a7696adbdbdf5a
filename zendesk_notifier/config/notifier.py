"""Runtime configuration shared by the event filter and the dispatcher.

The tracker hands the listener a flat mapping of option name to string value.
`NotifierConfiguration.apply_options` validates such a mapping against the
current state and swaps in the result as one immutable snapshot.
"""

import threading
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from pydantic import ValidationError

from zendesk_notifier.logging import get_logger

from .exceptions import ConfigurationError
from .models import NotificationPolicy, ServerConfiguration

logger = get_logger(__name__, component="config")

ZENDESK_URL = "ZendeskUrl"
LOGIN_NAME = "LoginName"
LOGIN_PASSWORD = "LoginPassword"
TICKET_ID_FIELD = "TicketIDField"
PUBLIC_COMMENTS = "Public comments"
KEYSTORE_PASSWORD = "Keystore password(For https)"
UPLOAD_ATTACHMENTS = "Upload attachments"
# Edits made by this tracker user are never forwarded, which breaks the
# Zendesk -> tracker -> Zendesk notification loop.
APPLICATION_LOGIN = "ZendeskApplicationLogin"

ACCEPTED_OPTIONS = (
    ZENDESK_URL,
    LOGIN_NAME,
    LOGIN_PASSWORD,
    TICKET_ID_FIELD,
    APPLICATION_LOGIN,
    PUBLIC_COMMENTS,
    UPLOAD_ATTACHMENTS,
    KEYSTORE_PASSWORD,
)

_SECRET_OPTIONS = {LOGIN_PASSWORD, KEYSTORE_PASSWORD}


@dataclass(frozen=True)
class ConfigurationSnapshot:
    """Consistent view of server settings and policy for one event."""

    server: ServerConfiguration
    policy: NotificationPolicy


def _flag(value: Optional[str]) -> bool:
    """Only the literal "false" disables a flag; absent means enabled."""
    return value != "false"


def mask_options(options: Mapping[str, str]) -> Dict[str, str]:
    """Copy of options safe for logging."""
    return {
        key: ("********" if key in _SECRET_OPTIONS else value)
        for key, value in options.items()
    }


class NotifierConfiguration:
    """Process-wide, thread-safe holder of the listener configuration.

    Readers call `snapshot()` (or the `server`/`policy` properties) and get an
    immutable object; writers go through `apply_options`, which validates the
    complete new state before replacing the old one.
    """

    def __init__(
        self,
        server: Optional[ServerConfiguration] = None,
        policy: Optional[NotificationPolicy] = None,
    ):
        self._lock = threading.Lock()
        self._snapshot = ConfigurationSnapshot(
            server=server or ServerConfiguration(),
            policy=policy or NotificationPolicy(),
        )

    def snapshot(self) -> ConfigurationSnapshot:
        return self._snapshot

    @property
    def server(self) -> ServerConfiguration:
        return self._snapshot.server

    @property
    def policy(self) -> NotificationPolicy:
        return self._snapshot.policy

    def apply_options(self, options: Mapping[str, str]) -> ConfigurationSnapshot:
        """Validate and apply a listener option mapping.

        URL, ticket field and suppressed actor are only changed when their
        option is present. Credentials are only changed when both login
        options are present. The two flags are always recomputed, since an
        absent value means "true".

        Args:
            options: Option name -> string value

        Returns:
            The snapshot now in effect

        Raises:
            ConfigurationError: If the options do not validate. The previous
                configuration stays in effect.
        """
        logger.info(
            "Received new listener options",
            extra={"event": "config.options.received", "options": mask_options(options)},
        )

        unknown = sorted(set(options) - set(ACCEPTED_OPTIONS))
        if unknown:
            logger.warning(
                f"Ignoring unknown listener options: {', '.join(unknown)}",
                extra={"event": "config.options.unknown"},
            )

        with self._lock:
            current = self._snapshot
            server_update = {}
            policy_update = {}

            if ZENDESK_URL in options:
                server_update["url"] = options[ZENDESK_URL]

            if LOGIN_NAME in options and LOGIN_PASSWORD in options:
                server_update["login_name"] = options[LOGIN_NAME]
                server_update["login_password"] = options[LOGIN_PASSWORD]
            elif LOGIN_NAME in options or LOGIN_PASSWORD in options:
                logger.warning(
                    "Login name and password must be supplied together; credentials unchanged",
                    extra={"event": "config.credentials.incomplete"},
                )

            if KEYSTORE_PASSWORD in options:
                server_update["keystore_password"] = options[KEYSTORE_PASSWORD]
                logger.warning(
                    "Keystore password accepted but not applied to the HTTPS transport",
                    extra={"event": "config.keystore.unused"},
                )

            if TICKET_ID_FIELD in options:
                policy_update["ticket_field_name"] = options[TICKET_ID_FIELD]
            if APPLICATION_LOGIN in options:
                policy_update["suppressed_actor"] = options[APPLICATION_LOGIN] or None
            policy_update["public_comments"] = _flag(options.get(PUBLIC_COMMENTS))
            policy_update["upload_attachments"] = _flag(options.get(UPLOAD_ATTACHMENTS))

            failures: List[ValidationError] = []
            server = current.server
            policy = current.policy
            try:
                server = ServerConfiguration.model_validate(
                    {**current.server.model_dump(), **server_update}
                )
            except ValidationError as e:
                failures.append(e)
            try:
                policy = NotificationPolicy.model_validate(
                    {**current.policy.model_dump(), **policy_update}
                )
            except ValidationError as e:
                failures.append(e)

            if failures:
                error = ConfigurationError.from_validation_errors(
                    "Failed to apply listener options",
                    failures,
                    suggestions=[
                        f"Check that {ZENDESK_URL} is an absolute http(s) URL",
                        f"Supply {LOGIN_NAME} and {LOGIN_PASSWORD} together",
                    ],
                )
                logger.error(
                    "Rejected listener options",
                    extra={"event": "config.options.rejected", "errors": error.errors},
                )
                raise error

            self._snapshot = ConfigurationSnapshot(server=server, policy=policy)

        logger.info(
            "Listener configuration updated",
            extra={
                "event": "config.options.applied",
                "zendesk_url": server.url,
                "login_name": server.login_name,
                "ticket_field_name": policy.ticket_field_name,
                "suppressed_actor": policy.suppressed_actor,
                "public_comments": policy.public_comments,
                "upload_attachments": policy.upload_attachments,
            },
        )
        return self._snapshot

