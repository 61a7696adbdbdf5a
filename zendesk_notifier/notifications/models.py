"""Result types of the notification dispatcher."""

from dataclasses import dataclass, field
from typing import List, Optional

from zendesk_notifier.messages.documents import DocumentKind


@dataclass
class DocumentOutcome:
    """Delivery outcome of one rendered document.

    Attributes:
        kind: Which document (ticket attributes or comment)
        sent: Whether the transport accepted it
        error: Why it was not sent, if it was not
    """

    kind: DocumentKind
    sent: bool
    error: Optional[str] = None


@dataclass
class DispatchResult:
    """Result of dispatching one tracker event.

    Attributes:
        issue_key: Tracker issue the event belongs to
        status: One of "sent", "partial", "failed", "filtered", "empty", "skipped"
        ticket_id: Linked Zendesk ticket, when one was found
        documents: Per-document outcomes, in send order
        errors: Recovered problems (e.g. failed attachment uploads)
        reason: Why nothing was sent, for the non-delivery statuses
    """

    issue_key: str
    status: str
    ticket_id: Optional[str] = None
    documents: List[DocumentOutcome] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    reason: Optional[str] = None

    def is_success(self) -> bool:
        """True only when every rendered document was delivered."""
        return self.status == "sent"

    @property
    def sent_kinds(self) -> List[DocumentKind]:
        return [outcome.kind for outcome in self.documents if outcome.sent]
