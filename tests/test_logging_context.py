"""Tests for logging context propagation."""

import threading

from zendesk_notifier.logging.context import (
    clear_log_context,
    get_log_context,
    log_context,
)


def test_empty_context():
    """Test that context starts empty."""
    assert get_log_context() == {}


def test_enter_and_exit():
    with log_context(issue_key="SUP-42", event_type="issue_updated"):
        assert get_log_context() == {"issue_key": "SUP-42", "event_type": "issue_updated"}

    assert get_log_context() == {}


def test_nested_context():
    """Inner scopes add fields and are undone in reverse order."""
    with log_context(issue_key="SUP-42"):
        with log_context(ticket_id="4711"):
            assert get_log_context() == {"issue_key": "SUP-42", "ticket_id": "4711"}

        assert get_log_context() == {"issue_key": "SUP-42"}

    assert get_log_context() == {}


def test_context_override():
    with log_context(ticket_id="4711"):
        with log_context(ticket_id="99"):
            assert get_log_context()["ticket_id"] == "99"
        assert get_log_context()["ticket_id"] == "4711"


def test_none_values_are_not_bound():
    with log_context(issue_key="SUP-42", ticket_id="4711"):
        with log_context(ticket_id=None, event_type="issue_updated"):
            assert get_log_context() == {
                "issue_key": "SUP-42",
                "ticket_id": "4711",
                "event_type": "issue_updated",
            }


def test_context_manager_restores_on_exception():
    try:
        with log_context(issue_key="SUP-42"):
            raise RuntimeError("boom")
    except RuntimeError:
        pass

    assert get_log_context() == {}


def test_clear_context():
    with log_context(issue_key="SUP-42", ticket_id="4711"):
        clear_log_context()

        assert get_log_context() == {}


def test_returned_context_is_a_copy():
    with log_context(issue_key="SUP-42"):
        context = get_log_context()
        context["ticket_id"] = "modified"

        assert get_log_context() == {"issue_key": "SUP-42"}


def test_threads_do_not_share_context():
    """A dispatch on another thread never sees this thread's fields."""
    seen = {}
    ready = threading.Event()

    def worker():
        with log_context(issue_key="OTHER-1"):
            ready.wait(timeout=5)
            seen["worker"] = get_log_context()

    thread = threading.Thread(target=worker)
    thread.start()
    with log_context(issue_key="SUP-42"):
        ready.set()
        thread.join()
        seen["main"] = get_log_context()

    assert seen == {"worker": {"issue_key": "OTHER-1"}, "main": {"issue_key": "SUP-42"}}
