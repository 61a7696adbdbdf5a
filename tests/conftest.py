"""Shared fixtures for Zendesk Notifier tests."""

import copy
from unittest.mock import Mock

import pytest

from zendesk_notifier.config.models import NotificationPolicy
from zendesk_notifier.config.notifier import NotifierConfiguration
from zendesk_notifier.events.models import FieldChange, IssueAttachment, IssueEvent
from zendesk_notifier.logging.context import clear_log_context
from zendesk_notifier.transport.base import AttachmentHandler, Transport

ZENDESK_URL = "https://example.zendesk.com"

WEBHOOK_PAYLOAD = {
    "timestamp": 1730716200000,
    "webhookEvent": "jira:issue_updated",
    "issue_event_type_name": "issue_generic",
    "user": {"name": "jdoe", "displayName": "Jane Doe"},
    "issue": {
        "key": "SUP-42",
        "fields": {
            "summary": "Printer on fire",
            "priority": {"id": "2", "name": "High"},
            "customfield_10010": "4711",
            "labels": ["hardware"],
            "attachment": [
                {
                    "id": "10001",
                    "filename": "smoke.png",
                    "content": "https://jira.example.com/secure/attachment/10001/smoke.png",
                    "mimeType": "image/png",
                    "size": 2048,
                }
            ],
        },
        "names": {
            "summary": "Summary",
            "priority": "Priority",
            "customfield_10010": "Zendesk TicketID",
            "labels": "Labels",
            "attachment": "Attachment",
        },
    },
    "changelog": {
        "items": [
            {"field": "priority", "fromString": "Low", "toString": "High"},
            {"field": "Attachment", "fromString": None, "toString": "smoke.png"},
        ]
    },
    "comment": {"body": "Fire department called"},
}


@pytest.fixture(autouse=True)
def clean_log_context():
    """Clear logging context before and after each test."""
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def webhook_payload():
    """A JIRA issue_updated webhook body (deep copy, safe to modify)."""
    return copy.deepcopy(WEBHOOK_PAYLOAD)


@pytest.fixture
def configuration():
    """Configuration pointing at a test Zendesk with a priority mapping."""
    config = NotifierConfiguration(
        policy=NotificationPolicy(field_mappings={"Priority": "zendesk_priority"})
    )
    config.apply_options(
        {
            "ZendeskUrl": ZENDESK_URL,
            "LoginName": "agent@example.com",
            "LoginPassword": "secret",
            "ZendeskApplicationLogin": "zendesk-integration",
        }
    )
    return config


@pytest.fixture
def transport():
    """Transport mock recording send() calls."""
    return Mock(spec=Transport)


@pytest.fixture
def attachment_handler():
    """Attachment handler mock returning a fixed token."""
    handler = Mock(spec=AttachmentHandler)
    handler.upload.return_value = "tok123"
    return handler


@pytest.fixture
def make_event():
    """Factory for IssueEvents linked to Zendesk ticket 4711."""

    def _make_event(
        event_type="issue_updated",
        actor="jdoe",
        changes=None,
        comment=None,
        attachments=None,
        fields=None,
        issue_key="SUP-42",
    ):
        return IssueEvent(
            event_type=event_type,
            issue_key=issue_key,
            actor=actor,
            author="Jane Doe",
            changes=[FieldChange(**change) for change in (changes or [])],
            comment=comment,
            attachments=[IssueAttachment(**a) for a in (attachments or [])],
            fields={"Zendesk TicketID": "4711"} if fields is None else fields,
        )

    return _make_event


@pytest.fixture
def smoke_attachment():
    return {
        "filename": "smoke.png",
        "content_url": "https://jira.example.com/secure/attachment/10001/smoke.png",
        "mime_type": "image/png",
        "size": 2048,
    }
