"""Tracker event models.

An IssueEvent is the tracker-neutral input of the dispatcher: who changed
which issue, the per-field deltas, an optional comment and any attachments
added by the change.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


class EventType(str, Enum):
    """JIRA issue event type names."""

    ISSUE_CREATED = "issue_created"
    ISSUE_UPDATED = "issue_updated"
    ISSUE_ASSIGNED = "issue_assigned"
    ISSUE_RESOLVED = "issue_resolved"
    ISSUE_CLOSED = "issue_closed"
    ISSUE_COMMENTED = "issue_commented"
    ISSUE_COMMENT_EDITED = "issue_comment_edited"
    ISSUE_REOPENED = "issue_reopened"
    ISSUE_DELETED = "issue_deleted"
    ISSUE_MOVED = "issue_moved"
    ISSUE_WORKLOGGED = "issue_worklogged"
    ISSUE_WORK_STARTED = "issue_work_started"
    ISSUE_WORK_STOPPED = "issue_work_stopped"
    ISSUE_WORKLOG_UPDATED = "issue_worklog_updated"
    ISSUE_WORKLOG_DELETED = "issue_worklog_deleted"
    ISSUE_GENERIC = "issue_generic"


class FieldChange(BaseModel):
    """One changed field as reported by the tracker's change log."""

    field: str = Field(..., min_length=1, description="Display name of the field")
    from_string: Optional[str] = Field(None, description="Previous value, if any")
    to_string: Optional[str] = Field(None, description="New value, if any")


class IssueAttachment(BaseModel):
    """Attachment added to the issue by this event."""

    filename: str = Field(..., min_length=1)
    content_url: str = Field(..., min_length=1, description="Where the tracker serves the bytes")
    mime_type: str = Field("application/octet-stream")
    size: Optional[int] = Field(None, ge=0)


class IssueEvent(BaseModel):
    """A tracker change notification for a single issue."""

    event_type: str = Field(..., min_length=1, description="Event type name, see EventType")
    issue_key: str = Field(..., min_length=1, description="Tracker issue key, e.g. SUP-12")
    actor: Optional[str] = Field(None, description="Login of the user who made the change")
    author: Optional[str] = Field(None, description="Display name of that user")
    changes: List[FieldChange] = Field(default_factory=list)
    comment: Optional[str] = Field(None, description="Comment added with this change")
    attachments: List[IssueAttachment] = Field(default_factory=list)
    fields: Dict[str, str] = Field(
        default_factory=dict, description="Current field values by display name"
    )

    @field_validator("issue_key", "event_type")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Field cannot be empty or whitespace-only")
        return stripped

    @property
    def display_author(self) -> str:
        return self.author or self.actor or "Anonymous"

    def field_value(self, field_name: str) -> Optional[str]:
        """Current value of a field, matching the name case-insensitively."""
        wanted = field_name.strip().casefold()
        for name, value in self.fields.items():
            if name.casefold() == wanted:
                return value
        return None

    def changed_value(self, field_name: str) -> Optional[str]:
        """New value of a field if this event changed it."""
        wanted = field_name.strip().casefold()
        for change in self.changes:
            if change.field.casefold() == wanted:
                return change.to_string
        return None
