"""Notification pipeline: event filtering and dispatch to Zendesk.

- EventFilter: decides which tracker events are forwarded
- NotificationDispatcher: builds, renders and sends the Zendesk updates
- DispatchResult / DocumentOutcome: what happened to an event
"""

from .dispatcher import NotificationDispatcher
from .filtering import REJECTED_EVENT_TYPES, EventFilter
from .models import DispatchResult, DocumentOutcome

__all__ = [
    "NotificationDispatcher",
    "EventFilter",
    "REJECTED_EVENT_TYPES",
    "DispatchResult",
    "DocumentOutcome",
]
