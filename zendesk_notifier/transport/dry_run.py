"""Transport that logs documents instead of sending them."""

from typing import List, Tuple

from zendesk_notifier.config.models import ServerConfiguration
from zendesk_notifier.logging import get_logger
from zendesk_notifier.messages.documents import DocumentKind

from .base import Transport

logger = get_logger(__name__, component="transport")


class DryRunTransport(Transport):
    """Records and logs every document it is asked to send."""

    def __init__(self):
        self.sent: List[Tuple[DocumentKind, str, str]] = []

    def send(
        self,
        kind: DocumentKind,
        document: str,
        ticket_id: str,
        server: ServerConfiguration,
    ) -> None:
        self.sent.append((kind, document, ticket_id))
        logger.info(
            f"[DRY_RUN] Would send {kind.value} update to Zendesk ticket {ticket_id}",
            extra={
                "event": "transport.dry_run",
                "document_kind": kind.value,
                "document": document,
            },
        )
