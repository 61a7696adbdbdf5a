"""Unit tests for ChangeMessage composition."""

from unittest.mock import Mock

import pytest

from zendesk_notifier.messages import (
    ChangeDelta,
    ChangeMessage,
    NotificationTemplateError,
    TemplateRenderer,
    parse_comment_document,
    parse_ticket_document,
)

HEADER = "Jane Doe has updated JIRA issue SUP-42 with:"


@pytest.fixture
def message():
    return ChangeMessage(author="Jane Doe", issue_key="SUP-42")


class TestChangeDelta:
    def test_line_with_old_value(self):
        assert ChangeDelta("Severity", "High", "Low").format_line() == "Severity: High (was: Low)"

    def test_line_without_old_value(self):
        assert ChangeDelta("Priority", "Urgent").format_line() == "Priority: Urgent"

    def test_only_first_letter_is_upper_case(self):
        assert ChangeDelta("FIX Version", "2.0").format_line() == "Fix version: 2.0"
        assert ChangeDelta("status", "Open").format_line() == "Status: Open"

    def test_empty_old_value_is_still_shown(self):
        assert ChangeDelta("Summary", "New", "").format_line() == "Summary: New (was: )"


class TestIsEmpty:
    def test_new_message_is_empty(self, message):
        assert message.is_empty() is True

    def test_change_makes_message_non_empty(self, message):
        message.add_change("Status", "Closed")
        assert message.is_empty() is False

    def test_comment_makes_message_non_empty(self, message):
        message.add_comment("hello")
        assert message.is_empty() is False

    def test_empty_comment_still_counts(self, message):
        message.add_comment("")
        assert message.is_empty() is False

    def test_change_comment_alone_keeps_message_empty(self, message):
        message.add_change_comment("Attachment smoke.png could not be uploaded to Zendesk")
        message.add_upload("tok123")
        assert message.is_empty() is True


class TestRender:
    def test_single_change(self, message):
        message.add_change("Severity", "High", "Low")

        parts = message.render()

        assert parts.has_comment()
        assert parts.comment.value == f"{HEADER}\nSeverity: High (was: Low)\n"
        assert not parts.has_ticket_changes()
        assert parts.ticket_changes_xml() is None

    def test_mapped_change_creates_ticket_document(self, message):
        message.add_change("Priority", "Urgent", mapped_field="zendesk_priority")

        parts = message.render()

        assert "Priority: Urgent" in parts.comment.value
        assert "(was:" not in parts.comment.value
        assert parse_ticket_document(parts.ticket_changes_xml()) == [("zendesk_priority", "Urgent")]

    def test_repeated_mapped_field_keeps_latest_value_in_place(self, message):
        message.add_change("Priority", "High", mapped_field="priority")
        message.add_change("Status", "Open", mapped_field="status")
        message.add_change("Priority", "Urgent", "High", mapped_field="priority")

        pairs = parse_ticket_document(message.render().ticket_changes_xml())

        assert pairs == [("priority", "Urgent"), ("status", "Open")]

    def test_unmapped_changes_do_not_create_ticket_document(self, message):
        message.add_change("Summary", "Printer on fire")
        message.add_change("Labels", "hardware")

        parts = message.render()

        assert parts.ticket_changes is None
        assert parts.ticket_changes_xml() is None

    def test_full_composition_order(self, message):
        message.add_change("Priority", "High", "Low")
        message.add_change("Attachment", "smoke.png")
        message.add_change_comment("Attachment report.pdf could not be uploaded to Zendesk")
        message.add_comment("Fire department called")

        value = message.render().comment.value

        assert value == (
            f"{HEADER}"
            "\nPriority: High (was: Low)"
            "\nAttachment: smoke.png\n"
            "\nAttachment report.pdf could not be uploaded to Zendesk\n"
            "\nComment: Fire department called\n"
        )

    def test_comment_only(self, message):
        message.add_comment("Any news?")

        assert message.render().comment.value == f"{HEADER}\nComment: Any news?\n"

    def test_last_comment_wins(self, message):
        message.add_comment("first")
        message.add_comment("second")

        value = message.render().comment.value

        assert "Comment: second" in value
        assert "first" not in value

    def test_change_comments_accumulate(self, message):
        message.add_change_comment("one")
        message.add_change_comment("two")

        assert message.render().comment.value == f"{HEADER}\none\ntwo\n"

    def test_nothing_recorded_renders_no_documents(self, message):
        parts = message.render()

        assert not parts.has_comment()
        assert not parts.has_ticket_changes()
        assert parts.comment_xml() is None
        assert parts.documents() == []

    def test_upload_token_is_included(self, message):
        message.add_change("Attachment", "smoke.png")
        message.add_upload("tok123")

        comment = parse_comment_document(message.render().comment_xml())

        assert comment.uploads == "tok123"

    def test_no_upload_element_without_token(self, message):
        message.add_change("Status", "Closed")

        assert "<uploads>" not in message.render().comment_xml()

    @pytest.mark.parametrize("public", [True, False])
    def test_visibility_flag(self, public):
        message = ChangeMessage("Jane Doe", "SUP-42", public_comments=public)
        message.add_comment("note")

        xml = message.render().comment_xml()

        assert f"<is-public>{str(public).lower()}</is-public>" in xml

    def test_tracker_name_in_header(self):
        message = ChangeMessage("Jane Doe", "OPS-1", tracker_name="Tracker")
        message.add_comment("x")

        assert message.render().comment.value.startswith("Jane Doe has updated Tracker issue OPS-1 with:")

    def test_render_twice_is_deterministic(self, message):
        message.add_change("Priority", "High", mapped_field="priority")
        message.add_comment("x")

        first = message.render()
        second = message.render()

        assert first == second
        assert first.comment is not second.comment
        assert first.comment_xml() == second.comment_xml()

    def test_render_reflects_state_added_after_first_render(self, message):
        message.add_change("Status", "Open")
        first = message.render()
        message.add_comment("later")

        assert "Comment: later" not in first.comment.value
        assert "Comment: later" in message.render().comment.value

    def test_template_failure_propagates(self):
        renderer = Mock(spec=TemplateRenderer)
        renderer.render_comment.side_effect = NotificationTemplateError("boom")
        message = ChangeMessage("Jane Doe", "SUP-42", renderer=renderer)
        message.add_change("Priority", "High", mapped_field="priority")

        with pytest.raises(NotificationTemplateError):
            message.render()

        assert message.ticket_changes().attributes == {"priority": "High"}
