"""Delivery of rendered documents and attachments to Zendesk.

    from zendesk_notifier.transport import ZendeskTransport, ZendeskAttachmentUploader
    transport = ZendeskTransport(timeout=30)
    transport.send(DocumentKind.COMMENT, xml, ticket_id, configuration.server)
"""

from .base import AttachmentHandler, HTTPClient, Transport
from .dry_run import DryRunTransport
from .exceptions import (
    AttachmentUploadError,
    TransportConfigurationError,
    TransportError,
    TransportHTTPError,
    TransportTimeoutError,
)
from .zendesk import ZendeskAttachmentUploader, ZendeskTransport, parse_upload_token

__all__ = [
    # Interfaces
    "Transport",
    "AttachmentHandler",
    "HTTPClient",
    # Implementations
    "ZendeskTransport",
    "ZendeskAttachmentUploader",
    "DryRunTransport",
    "parse_upload_token",
    # Exceptions
    "TransportError",
    "TransportConfigurationError",
    "TransportHTTPError",
    "TransportTimeoutError",
    "AttachmentUploadError",
]
