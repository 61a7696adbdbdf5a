"""Change message composition and Zendesk document rendering."""

from .builder import ChangeMessage
from .documents import (
    CommentDocument,
    DocumentKind,
    MessageParts,
    TicketDocument,
    parse_comment_document,
    parse_ticket_document,
)
from .models import (
    ChangeDelta,
    MessageError,
    MessageRenderError,
    NotificationTemplateError,
)
from .templates import TemplateRenderer

__all__ = [
    "ChangeMessage",
    "ChangeDelta",
    "MessageParts",
    "TicketDocument",
    "CommentDocument",
    "DocumentKind",
    "TemplateRenderer",
    "parse_ticket_document",
    "parse_comment_document",
    "MessageError",
    "MessageRenderError",
    "NotificationTemplateError",
]
