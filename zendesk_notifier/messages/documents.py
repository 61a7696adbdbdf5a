"""The two Zendesk update documents and their XML form.

Zendesk cannot handle attribute changes and a comment in one request, so a
change message renders to two independent documents:

    <ticket><priority>urgent</priority>...</ticket>
    <comment><is-public>true</is-public><value>...</value><uploads>token</uploads></comment>

Either may be absent. Absent documents serialize to None rather than an
empty string so callers can tell "nothing to send" from an empty payload.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from lxml import etree

from .models import MessageRenderError

TICKET_ROOT = "ticket"
COMMENT_ROOT = "comment"


class DocumentKind(str, Enum):
    """Kinds of documents sent to Zendesk, one request each."""

    TICKET = "ticket"
    COMMENT = "comment"


@dataclass(frozen=True)
class TicketDocument:
    """Ticket attribute updates in insertion order."""

    attributes: Dict[str, str] = field(default_factory=dict)

    def to_xml(self) -> str:
        root = etree.Element(TICKET_ROOT)
        try:
            for name, value in self.attributes.items():
                etree.SubElement(root, name).text = value
        except ValueError as e:
            raise MessageRenderError(f"Cannot build <{TICKET_ROOT}> document: {e}") from e
        return _serialize(root)


@dataclass(frozen=True)
class CommentDocument:
    """A comment to add to the ticket."""

    value: str
    is_public: bool = True
    uploads: Optional[str] = None

    def to_xml(self) -> str:
        root = etree.Element(COMMENT_ROOT)
        try:
            etree.SubElement(root, "is-public").text = "true" if self.is_public else "false"
            etree.SubElement(root, "value").text = self.value
            if self.uploads is not None:
                etree.SubElement(root, "uploads").text = self.uploads
        except ValueError as e:
            raise MessageRenderError(f"Cannot build <{COMMENT_ROOT}> document: {e}") from e
        return _serialize(root)


@dataclass(frozen=True)
class MessageParts:
    """Rendered output of a ChangeMessage."""

    ticket_changes: Optional[TicketDocument] = None
    comment: Optional[CommentDocument] = None

    def has_ticket_changes(self) -> bool:
        return self.ticket_changes is not None

    def has_comment(self) -> bool:
        return self.comment is not None

    def ticket_changes_xml(self) -> Optional[str]:
        """Ticket document as XML, or None if there are no attribute changes.

        Raises:
            MessageRenderError: If the document is not representable as XML
        """
        if self.ticket_changes is None:
            return None
        return self.ticket_changes.to_xml()

    def comment_xml(self) -> Optional[str]:
        """Comment document as XML, or None if there is nothing to say.

        Raises:
            MessageRenderError: If the document is not representable as XML
        """
        if self.comment is None:
            return None
        return self.comment.to_xml()

    def documents(self) -> List[Tuple[DocumentKind, object]]:
        """Present documents, ticket changes first."""
        present = []
        if self.ticket_changes is not None:
            present.append((DocumentKind.TICKET, self.ticket_changes))
        if self.comment is not None:
            present.append((DocumentKind.COMMENT, self.comment))
        return present


def _serialize(root) -> str:
    return etree.tostring(root, encoding="UTF-8", xml_declaration=True).decode("utf-8")


def _parse(text: str, expected_root: str):
    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    try:
        root = etree.fromstring(text.encode("utf-8"), parser)
    except etree.XMLSyntaxError as e:
        raise MessageRenderError(f"Malformed document: {e}") from e
    if root.tag != expected_root:
        raise MessageRenderError(f"Expected <{expected_root}> root, got <{root.tag}>")
    return root


def parse_ticket_document(text: str) -> List[Tuple[str, str]]:
    """Read a ticket document back into ordered (attribute, value) pairs."""
    root = _parse(text, TICKET_ROOT)
    return [(child.tag, child.text or "") for child in root]


def parse_comment_document(text: str) -> CommentDocument:
    """Read a comment document back into a CommentDocument."""
    root = _parse(text, COMMENT_ROOT)
    uploads = root.find("uploads")
    return CommentDocument(
        value=root.findtext("value", default=""),
        is_public=root.findtext("is-public") == "true",
        uploads=uploads.text if uploads is not None else None,
    )
