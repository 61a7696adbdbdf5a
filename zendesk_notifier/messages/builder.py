"""Accumulates the changes of one tracker event into a Zendesk update."""

from typing import Dict, List, Optional

from .documents import CommentDocument, MessageParts, TicketDocument
from .models import ChangeDelta
from .templates import TemplateRenderer


class ChangeMessage:
    """Change message for a single tracker event.

    Collects field deltas, the user's comment, system notes and an upload
    token, then renders them into MessageParts: a ticket document holding
    the mapped attribute changes and a comment document describing all
    changes in readable form.

    A ChangeMessage belongs to the dispatch call that created it and must
    not be shared between events.
    """

    def __init__(
        self,
        author: str,
        issue_key: str,
        public_comments: bool = True,
        tracker_name: str = "JIRA",
        renderer: Optional[TemplateRenderer] = None,
    ):
        self.author = author
        self.issue_key = issue_key
        self.public_comments = public_comments
        self.tracker_name = tracker_name
        self.renderer = renderer or TemplateRenderer()

        self._deltas: List[ChangeDelta] = []
        self._ticket_attributes: Optional[Dict[str, str]] = None
        self._comment: Optional[str] = None
        self._change_comments: List[str] = []
        self._upload_token: Optional[str] = None

    @property
    def deltas(self) -> List[ChangeDelta]:
        return list(self._deltas)

    def add_change(
        self,
        display_field: str,
        new_value: str,
        old_value: Optional[str] = None,
        mapped_field: Optional[str] = None,
    ) -> None:
        """Record a changed field.

        Args:
            display_field: Tracker field name shown in the comment
            new_value: Value after the change
            old_value: Value before the change, if there was one
            mapped_field: Zendesk ticket attribute the field maps to. When
                given, the new value is also sent as a ticket attribute
                update; a second change of the same attribute replaces the
                first value.
        """
        if mapped_field is not None:
            if self._ticket_attributes is None:
                self._ticket_attributes = {}
            self._ticket_attributes[mapped_field] = new_value

        self._deltas.append(ChangeDelta(display_field, new_value, old_value))

    def add_comment(self, comment: str) -> None:
        """Set the user's comment. A later call replaces an earlier one."""
        self._comment = comment

    def add_change_comment(self, comment: str) -> None:
        """Append a system note, e.g. about a failed attachment upload."""
        self._change_comments.append(comment)

    def add_upload(self, upload_token: str) -> None:
        self._upload_token = upload_token

    def is_empty(self) -> bool:
        """True when there are no deltas and no user comment.

        System notes added with add_change_comment() are not considered.
        """
        return not self._deltas and self._comment is None

    def render(self) -> MessageParts:
        """Build the ticket and comment documents from the current state.

        Each call builds new documents from the accumulated state.

        Raises:
            NotificationTemplateError: If the comment body fails to render
        """
        details = ""

        if self._deltas:
            details += "".join(f"\n{delta.format_line()}" for delta in self._deltas) + "\n"

        if self._change_comments:
            details += "".join(f"\n{line}" for line in self._change_comments) + "\n"

        if self._comment is not None:
            details += f"\nComment: {self._comment}\n"

        comment = None
        if details:
            body = self.renderer.render_comment(
                author=self.author,
                tracker=self.tracker_name,
                issue_key=self.issue_key,
                details=details,
            )
            comment = CommentDocument(
                value=body,
                is_public=self.public_comments,
                uploads=self._upload_token,
            )

        return MessageParts(ticket_changes=self.ticket_changes(), comment=comment)

    def ticket_changes(self) -> Optional[TicketDocument]:
        """Ticket document alone, for when the comment cannot be rendered."""
        if self._ticket_attributes is None:
            return None
        return TicketDocument(attributes=dict(self._ticket_attributes))
