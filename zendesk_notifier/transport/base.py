"""Collaborator interfaces and the shared HTTP client.

The dispatcher only knows the two abstract collaborators defined here:
a Transport that delivers one rendered document, and an AttachmentHandler
that turns an issue attachment into a Zendesk upload token.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

import requests

from zendesk_notifier.config.models import ServerConfiguration
from zendesk_notifier.events.models import IssueAttachment
from zendesk_notifier.logging import get_logger
from zendesk_notifier.messages.documents import DocumentKind

from .exceptions import (
    TransportConfigurationError,
    TransportHTTPError,
    TransportTimeoutError,
)

logger = get_logger(__name__, component="transport")


class Transport(ABC):
    """Delivers rendered documents to Zendesk."""

    @abstractmethod
    def send(
        self,
        kind: DocumentKind,
        document: str,
        ticket_id: str,
        server: ServerConfiguration,
    ) -> None:
        """Send one document to the given ticket.

        Raises:
            TransportError: If delivery fails
        """


class AttachmentHandler(ABC):
    """Uploads issue attachments to Zendesk."""

    @abstractmethod
    def upload(
        self,
        attachment: IssueAttachment,
        server: ServerConfiguration,
        token: Optional[str] = None,
    ) -> str:
        """Upload one attachment and return the upload token.

        Args:
            attachment: Attachment to transfer
            server: Zendesk endpoint and credentials
            token: Token of an earlier upload to add this file to

        Raises:
            AttachmentUploadError: If the attachment cannot be transferred
        """


class HTTPClient:
    """Shared HTTP request handling for the Zendesk and tracker calls.

    Attributes:
        timeout: HTTP request timeout in seconds
        user_agent: User-Agent header for HTTP requests
    """

    def __init__(
        self,
        timeout: int = 30,
        user_agent: str = "ZendeskNotifier/1.0",
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Args:
            timeout: HTTP request timeout in seconds (range 5-300)
            user_agent: User-Agent header for requests
            session: Session to use, mainly for tests

        Raises:
            TransportConfigurationError: If timeout or user_agent is invalid
        """
        if not 5 <= timeout <= 300:
            raise TransportConfigurationError(
                f"Timeout must be between 5 and 300 seconds, got: {timeout}"
            )
        if not user_agent or not user_agent.strip():
            raise TransportConfigurationError("user_agent cannot be empty")

        self.timeout = timeout
        self.user_agent = user_agent.strip()
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": self.user_agent})

    def _request(
        self,
        method: str,
        url: str,
        auth: Optional[tuple[str, str]] = None,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None,
        data: Optional[bytes] = None,
    ) -> requests.Response:
        """Make an HTTP request, mapping failures to transport errors.

        Returns:
            The response, only when its status is below 400

        Raises:
            TransportHTTPError: On 4xx/5xx status or connection failure
            TransportTimeoutError: On request timeout
        """
        try:
            logger.debug(
                f"HTTP {method} request to {url}",
                extra={
                    "event": "transport.request",
                    "method": method,
                    "url": url,
                    "timeout": self.timeout,
                },
            )

            response = self._session.request(
                method=method,
                url=url,
                auth=auth,
                headers=headers,
                params=params,
                data=data,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            logger.warning(
                f"Request to {url} timed out after {self.timeout} seconds",
                extra={"event": "transport.timeout", "url": url, "timeout": self.timeout},
            )
            raise TransportTimeoutError(
                f"Request to {url} timed out after {self.timeout} seconds",
                url=url,
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error(
                f"Request to {url} failed: {e}",
                extra={"event": "transport.error", "error_type": type(e).__name__, "url": url},
            )
            raise TransportHTTPError(
                f"Request to {url} failed: {e}",
                status_code=0,
                url=url,
            ) from e

        if response.status_code >= 400:
            level = logging.WARNING if response.status_code >= 500 else logging.ERROR
            logger.log(
                level,
                f"HTTP {response.status_code} error from {url}",
                extra={
                    "event": "transport.http_error",
                    "status_code": response.status_code,
                    "url": url,
                },
            )
            raise TransportHTTPError(
                f"HTTP {response.status_code}: {response.reason}",
                status_code=response.status_code,
                url=url,
            )

        logger.debug(
            "HTTP request succeeded",
            extra={"event": "transport.succeeded", "status_code": response.status_code, "url": url},
        )
        return response
