"""Translate JIRA webhook payloads into IssueEvent models."""

from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from zendesk_notifier.logging import get_logger

from .models import EventType, FieldChange, IssueAttachment, IssueEvent

logger = get_logger(__name__, component="webhook")

# Fallback for payloads that only carry `webhookEvent`
_WEBHOOK_EVENT_TYPES = {
    "jira:issue_created": EventType.ISSUE_CREATED.value,
    "jira:issue_updated": EventType.ISSUE_UPDATED.value,
    "jira:issue_deleted": EventType.ISSUE_DELETED.value,
    "comment_created": EventType.ISSUE_COMMENTED.value,
    "comment_updated": EventType.ISSUE_COMMENT_EDITED.value,
    "jira:worklog_updated": EventType.ISSUE_WORKLOG_UPDATED.value,
    "worklog_created": EventType.ISSUE_WORKLOGGED.value,
    "worklog_updated": EventType.ISSUE_WORKLOG_UPDATED.value,
    "worklog_deleted": EventType.ISSUE_WORKLOG_DELETED.value,
}

ATTACHMENT_FIELD = "Attachment"


class WebhookPayloadError(ValueError):
    """Raised when a webhook body cannot be turned into an IssueEvent."""


def parse_webhook(payload: Dict[str, Any]) -> IssueEvent:
    """Build an IssueEvent from a JIRA webhook body.

    Reads the event type, acting user, change log items, the added comment
    and the attachments referenced by `Attachment` change log items. Field
    values are keyed by display name, using the `names` map when the payload
    was expanded with it.

    Args:
        payload: Decoded webhook JSON

    Returns:
        IssueEvent

    Raises:
        WebhookPayloadError: If the payload lacks an issue or an event type,
            or a value has the wrong type
    """
    if not isinstance(payload, dict):
        raise WebhookPayloadError(f"Expected JSON object, got {type(payload).__name__}")

    issue = payload.get("issue")
    if not isinstance(issue, dict):
        raise WebhookPayloadError("Webhook payload has no 'issue' object")

    webhook_event = payload.get("webhookEvent")
    event_type = payload.get("issue_event_type_name")
    if not event_type and isinstance(webhook_event, str):
        event_type = _WEBHOOK_EVENT_TYPES.get(webhook_event)
    if not event_type:
        raise WebhookPayloadError(
            f"Cannot determine event type (webhookEvent={webhook_event!r})"
        )

    # Sub-objects of the wrong type are treated as absent
    user = _mapping(payload.get("user"))
    raw_fields = _mapping(issue.get("fields"))
    names = _mapping(issue.get("names")) or _mapping(payload.get("names"))
    comment = _mapping(payload.get("comment")).get("body")

    try:
        changes = _parse_changes(_mapping(payload.get("changelog")))
        return IssueEvent(
            event_type=event_type,
            issue_key=issue.get("key") or "",
            actor=user.get("name") or user.get("accountId"),
            author=user.get("displayName"),
            changes=changes,
            comment=comment,
            attachments=_parse_attachments(changes, raw_fields),
            fields=_flatten_fields(raw_fields, names),
        )
    except ValidationError as e:
        raise WebhookPayloadError(f"Invalid webhook payload: {e}") from e


def _mapping(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _parse_changes(changelog: Dict[str, Any]) -> List[FieldChange]:
    items = changelog.get("items")
    if not isinstance(items, list):
        return []

    changes = []
    for item in items:
        if not isinstance(item, dict) or not item.get("field"):
            continue
        changes.append(
            FieldChange(
                field=item["field"],
                from_string=item.get("fromString"),
                to_string=item.get("toString"),
            )
        )
    return changes


def _parse_attachments(
    changes: List[FieldChange], raw_fields: Dict[str, Any]
) -> List[IssueAttachment]:
    """Attachments named by `Attachment` change log items with a new value."""
    added = [
        change.to_string
        for change in changes
        if change.field.casefold() == ATTACHMENT_FIELD.casefold() and change.to_string
    ]
    if not added:
        return []

    entries = raw_fields.get("attachment")
    known = {}
    for entry in entries if isinstance(entries, list) else []:
        if isinstance(entry, dict) and isinstance(entry.get("filename"), str) and entry.get("content"):
            known[entry["filename"]] = entry

    attachments = []
    for filename in added:
        entry = known.get(filename)
        if entry is None:
            logger.warning(
                f"Attachment {filename} is not listed on the issue, skipping it",
                extra={"event": "webhook.attachment.missing", "attachment_name": filename},
            )
            continue
        attachments.append(
            IssueAttachment(
                filename=entry["filename"],
                content_url=entry["content"],
                mime_type=entry.get("mimeType") or "application/octet-stream",
                size=entry.get("size"),
            )
        )
    return attachments


def _flatten_fields(raw_fields: Dict[str, Any], names: Dict[str, str]) -> Dict[str, str]:
    fields = {}
    for field_id, value in raw_fields.items():
        text = _field_text(value)
        if text is not None:
            display_name = names.get(field_id)
            fields[display_name if isinstance(display_name, str) else field_id] = text
    return fields


def _field_text(value: Any) -> Optional[str]:
    """Plain-text form of a JIRA field value; None for structured values."""
    if value is None or isinstance(value, (list, bool)):
        return None
    if isinstance(value, (str, int, float)):
        return str(value)
    if isinstance(value, dict):
        for key in ("value", "name", "displayName", "key"):
            if value.get(key) is not None:
                return str(value[key])
    return None
