"""Per-event logging context.

Fields bound here (issue key, event type, ticket id) are attached to every
log record emitted while an event is being dispatched. The context lives in a
ContextVar, so concurrent dispatches on different tracker threads never see
each other's fields.
"""

from contextvars import ContextVar, Token
from typing import Any, Dict, Optional

LogContextVar: ContextVar[Dict[str, Any]] = ContextVar("log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the current logging context."""
    return LogContextVar.get().copy()


def clear_log_context() -> None:
    """Drop all context fields. Mostly useful in tests."""
    LogContextVar.set({})


class log_context:
    """Scoped logging context; nested scopes add to the enclosing fields.

    Fields with a None value are not bound, so an optional value such as a
    ticket id that is not known yet leaves the enclosing field alone.

    Example:
        >>> with log_context(issue_key="SUP-12", event_type="issue_updated"):
        ...     with log_context(ticket_id="4711"):
        ...         logger.info("Sending ticket update")
    """

    def __init__(self, **fields):
        self.fields = {key: value for key, value in fields.items() if value is not None}
        self._token: Optional[Token] = None

    def __enter__(self):
        self._token = LogContextVar.set({**LogContextVar.get(), **self.fields})
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._token is not None:
            LogContextVar.reset(self._token)
            self._token = None
        return False
