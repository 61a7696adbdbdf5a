"""Turns tracker events into Zendesk ticket updates.

This module provides the NotificationDispatcher, which runs one event
through the whole pipeline: filtering, change message composition,
attachment upload, rendering and delivery.
"""

import logging
from typing import Iterable, List, Optional

from zendesk_notifier.config.models import NotificationPolicy, ServerConfiguration
from zendesk_notifier.config.notifier import NotifierConfiguration
from zendesk_notifier.events.models import IssueEvent
from zendesk_notifier.logging import get_logger, log_context
from zendesk_notifier.messages.builder import ChangeMessage
from zendesk_notifier.messages.documents import DocumentKind, MessageParts
from zendesk_notifier.messages.models import MessageRenderError
from zendesk_notifier.messages.templates import TemplateRenderer
from zendesk_notifier.transport.base import AttachmentHandler, Transport
from zendesk_notifier.transport.exceptions import TransportError

from .filtering import EventFilter
from .models import DispatchResult, DocumentOutcome

logger = get_logger(__name__, component="dispatcher")


class NotificationDispatcher:
    """Forwards tracker issue changes to the linked Zendesk ticket.

    For every event:
    1. Filter out irrelevant events and the suppressed actor's edits
    2. Find the linked Zendesk ticket
    3. Record field changes (skipping the ticket ID field itself)
    4. Record the added comment
    5. Upload new attachments, noting failures in the comment
    6. Stop if the message is empty
    7. Render and send the ticket and comment documents separately

    The configuration is read once per event. A dispatcher holds no
    per-event state and can be called from several threads at once.
    """

    def __init__(
        self,
        configuration: NotifierConfiguration,
        transport: Transport,
        attachment_handler: Optional[AttachmentHandler] = None,
        event_filter: Optional[EventFilter] = None,
        template_renderer: Optional[TemplateRenderer] = None,
        tracker_name: str = "JIRA",
        logger_instance: Optional[logging.Logger] = None,
    ):
        """
        Args:
            configuration: Shared listener configuration
            transport: Delivers rendered documents
            attachment_handler: Uploads attachments; without one, attachments
                are not uploaded
            event_filter: Event filter (creates one on the configuration if None)
            template_renderer: Comment template renderer (creates default if None)
            tracker_name: Tracker name used in comment text
            logger_instance: Logger instance (uses module logger if None)
        """
        self.configuration = configuration
        self.transport = transport
        self.attachment_handler = attachment_handler
        self.event_filter = event_filter or EventFilter(configuration)
        self.template_renderer = template_renderer or TemplateRenderer()
        self.tracker_name = tracker_name
        self.logger = logger_instance or logger

    def dispatch(self, event: IssueEvent) -> DispatchResult:
        """Send the Zendesk updates for one tracker event.

        Markup and transport failures are recorded in the result rather than
        raised; a failure on one document does not stop the other.

        Args:
            event: Tracker event

        Returns:
            DispatchResult describing what was sent
        """
        snapshot = self.configuration.snapshot()
        policy = snapshot.policy

        with log_context(issue_key=event.issue_key, event_type=event.event_type):
            if not self.event_filter.should_notify(event, policy):
                return DispatchResult(issue_key=event.issue_key, status="filtered")

            ticket_id = self._linked_ticket(event, policy)
            if ticket_id is None:
                self.logger.info(
                    f"Skipping {event.issue_key}: no Zendesk ticket in field '{policy.ticket_field_name}'",
                    extra={"event": "notification.skip", "reason": "no_linked_ticket"},
                )
                return DispatchResult(
                    issue_key=event.issue_key,
                    status="skipped",
                    reason="no_linked_ticket",
                )

            with log_context(ticket_id=ticket_id):
                return self._dispatch_to_ticket(event, ticket_id, policy, snapshot.server)

    def dispatch_many(self, events: Iterable[IssueEvent]) -> List[DispatchResult]:
        """Dispatch several events; one event's failure does not stop the rest."""
        results = []

        for event in events:
            try:
                results.append(self.dispatch(event))
            except Exception as e:
                self.logger.error(
                    f"Unexpected error dispatching event for {event.issue_key}: {e}",
                    exc_info=True,
                    extra={"event": "notification.error"},
                )
                results.append(
                    DispatchResult(
                        issue_key=event.issue_key,
                        status="failed",
                        errors=[str(e)],
                    )
                )

        sent = sum(1 for r in results if r.status == "sent")
        failed = sum(1 for r in results if r.status in ("failed", "partial"))
        self.logger.info(
            f"Dispatch batch complete: {sent} sent, {failed} failed, "
            f"{len(results) - sent - failed} not sent (total: {len(results)})"
        )
        return results

    def _dispatch_to_ticket(
        self,
        event: IssueEvent,
        ticket_id: str,
        policy: NotificationPolicy,
        server: ServerConfiguration,
    ) -> DispatchResult:
        result = DispatchResult(issue_key=event.issue_key, status="failed", ticket_id=ticket_id)

        message = ChangeMessage(
            author=event.display_author,
            issue_key=event.issue_key,
            public_comments=policy.public_comments,
            tracker_name=self.tracker_name,
            renderer=self.template_renderer,
        )

        for change in event.changes:
            if policy.is_ticket_field(change.field):
                continue
            message.add_change(
                change.field,
                change.to_string or "",
                old_value=change.from_string or None,
                mapped_field=policy.mapped_attribute(change.field),
            )

        if event.comment is not None:
            message.add_comment(event.comment)

        if event.attachments:
            if not policy.upload_attachments:
                self.logger.debug(
                    "Attachment upload disabled, skipping attachments",
                    extra={"event": "notification.attachments.disabled"},
                )
            elif self.attachment_handler is None:
                self.logger.debug(
                    "No attachment handler configured, skipping attachments",
                    extra={"event": "notification.attachments.unavailable"},
                )
            else:
                self._upload_attachments(event, message, server, result)

        if message.is_empty():
            self.logger.info(
                f"Nothing to send for {event.issue_key}",
                extra={"event": "notification.skip", "reason": "empty_message"},
            )
            result.status = "empty"
            result.reason = "empty_message"
            return result

        comment_failure = None
        try:
            parts = message.render()
        except MessageRenderError as e:
            self.logger.error(
                f"Failed to render comment for {event.issue_key}: {e}",
                exc_info=True,
                extra={"event": "notification.render.failure", "document_kind": "comment"},
            )
            comment_failure = DocumentOutcome(kind=DocumentKind.COMMENT, sent=False, error=str(e))
            parts = MessageParts(ticket_changes=message.ticket_changes())

        for kind, document in parts.documents():
            result.documents.append(self._send_document(kind, document, ticket_id, server))
        if comment_failure is not None:
            result.documents.append(comment_failure)

        sent = len(result.sent_kinds)
        if sent and sent == len(result.documents):
            result.status = "sent"
        elif sent:
            result.status = "partial"
        else:
            result.status = "failed"

        self.logger.info(
            f"Dispatched {event.issue_key} to Zendesk ticket {ticket_id}: {result.status}",
            extra={
                "event": "notification.dispatched",
                "status": result.status,
                "documents_sent": [kind.value for kind in result.sent_kinds],
            },
        )
        return result

    def _send_document(
        self,
        kind: DocumentKind,
        document,
        ticket_id: str,
        server: ServerConfiguration,
    ) -> DocumentOutcome:
        try:
            xml = document.to_xml()
        except MessageRenderError as e:
            self.logger.error(
                f"Omitting {kind.value} document: {e}",
                extra={"event": "notification.render.failure", "document_kind": kind.value},
            )
            return DocumentOutcome(kind=kind, sent=False, error=str(e))

        try:
            self.transport.send(kind, xml, ticket_id, server)
        except TransportError as e:
            self.logger.error(
                f"Failed to send {kind.value} document: {e}",
                extra={
                    "event": "notification.document.failure",
                    "document_kind": kind.value,
                    "error_type": type(e).__name__,
                },
            )
            return DocumentOutcome(kind=kind, sent=False, error=str(e))

        self.logger.info(
            f"Sent {kind.value} document",
            extra={"event": "notification.document.sent", "document_kind": kind.value},
        )
        return DocumentOutcome(kind=kind, sent=True)

    def _upload_attachments(
        self,
        event: IssueEvent,
        message: ChangeMessage,
        server: ServerConfiguration,
        result: DispatchResult,
    ) -> None:
        """Upload all attachments into one Zendesk upload batch."""
        token = None
        for attachment in event.attachments:
            try:
                token = self.attachment_handler.upload(attachment, server, token)
            except TransportError as e:
                error_msg = f"Attachment {attachment.filename} could not be uploaded to Zendesk"
                self.logger.warning(
                    f"{error_msg}: {e}",
                    extra={
                        "event": "notification.attachment.failure",
                        "attachment_name": attachment.filename,
                        "error_type": type(e).__name__,
                    },
                )
                message.add_change_comment(error_msg)
                result.errors.append(f"{error_msg}: {e}")

        if token is not None:
            message.add_upload(token)

    @staticmethod
    def _linked_ticket(event: IssueEvent, policy: NotificationPolicy) -> Optional[str]:
        """Zendesk ticket ID from the tracked field; a value set by this event wins."""
        ticket_id = event.changed_value(policy.ticket_field_name) or event.field_value(
            policy.ticket_field_name
        )
        if ticket_id is None or not ticket_id.strip():
            return None
        return ticket_id.strip()
