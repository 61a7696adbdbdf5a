"""Tracker event models and webhook parsing."""

from .models import EventType, FieldChange, IssueAttachment, IssueEvent
from .webhook import WebhookPayloadError, parse_webhook

__all__ = [
    "EventType",
    "FieldChange",
    "IssueAttachment",
    "IssueEvent",
    "WebhookPayloadError",
    "parse_webhook",
]
