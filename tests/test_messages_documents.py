"""Tests for the Zendesk XML documents."""

import pytest

from zendesk_notifier.messages import (
    CommentDocument,
    DocumentKind,
    MessageParts,
    MessageRenderError,
    TicketDocument,
    parse_comment_document,
    parse_ticket_document,
)


class TestTicketDocument:
    def test_serializes_attributes_in_order(self):
        xml = TicketDocument({"priority": "urgent", "status": "open"}).to_xml()

        assert xml.startswith("<?xml")
        assert "<ticket><priority>urgent</priority><status>open</status></ticket>" in xml

    def test_special_characters_are_escaped(self):
        xml = TicketDocument({"subject": "a < b & c"}).to_xml()

        assert "a &lt; b &amp; c" in xml
        assert parse_ticket_document(xml) == [("subject", "a < b & c")]

    def test_invalid_attribute_name(self):
        with pytest.raises(MessageRenderError):
            TicketDocument({"not an element": "x"}).to_xml()


class TestCommentDocument:
    def test_public_comment(self):
        xml = CommentDocument("Hello").to_xml()

        assert "<comment><is-public>true</is-public><value>Hello</value></comment>" in xml

    def test_private_comment_with_upload(self):
        xml = CommentDocument("Hello", is_public=False, uploads="tok123").to_xml()

        assert "<is-public>false</is-public>" in xml
        assert "<uploads>tok123</uploads>" in xml

    def test_multiline_value_is_preserved(self):
        value = "Jane Doe has updated JIRA issue SUP-42 with:\nStatus: Closed\n"

        parsed = parse_comment_document(CommentDocument(value).to_xml())

        assert parsed == CommentDocument(value)

    def test_markup_in_value_is_escaped(self):
        xml = CommentDocument("<script>alert(1)</script>").to_xml()

        assert "<script>" not in xml
        assert parse_comment_document(xml).value == "<script>alert(1)</script>"

    def test_control_characters_are_rejected(self):
        with pytest.raises(MessageRenderError):
            CommentDocument("bell\x07").to_xml()


class TestMessageParts:
    def test_absent_documents_serialize_to_none(self):
        parts = MessageParts()

        assert parts.ticket_changes_xml() is None
        assert parts.comment_xml() is None
        assert parts.documents() == []

    def test_documents_ticket_first(self):
        ticket = TicketDocument({"priority": "high"})
        comment = CommentDocument("x")

        kinds = [kind for kind, _ in MessageParts(ticket, comment).documents()]

        assert kinds == [DocumentKind.TICKET, DocumentKind.COMMENT]

    def test_comment_only(self):
        parts = MessageParts(comment=CommentDocument("x"))

        assert not parts.has_ticket_changes()
        assert parts.has_comment()
        assert parts.documents() == [(DocumentKind.COMMENT, CommentDocument("x"))]


class TestParsing:
    def test_wrong_root(self):
        with pytest.raises(MessageRenderError):
            parse_ticket_document(CommentDocument("x").to_xml())

    def test_malformed(self):
        with pytest.raises(MessageRenderError):
            parse_comment_document("<comment><value>")
