"""Decides which tracker events are worth a Zendesk update."""

from typing import Optional

from zendesk_notifier.config.models import NotificationPolicy
from zendesk_notifier.config.notifier import NotifierConfiguration
from zendesk_notifier.events.models import EventType, IssueEvent
from zendesk_notifier.logging import get_logger

logger = get_logger(__name__, component="filter")

# Event types that never produce a notification
REJECTED_EVENT_TYPES = frozenset(
    {
        EventType.ISSUE_WORKLOGGED.value,
        EventType.ISSUE_CREATED.value,
        EventType.ISSUE_ASSIGNED.value,
        EventType.ISSUE_WORKLOG_UPDATED.value,
        EventType.ISSUE_WORKLOG_DELETED.value,
    }
)


class EventFilter:
    """Drops irrelevant events and edits made by the suppressed actor."""

    def __init__(self, configuration: NotifierConfiguration):
        self.configuration = configuration

    def should_notify(
        self, event: IssueEvent, policy: Optional[NotificationPolicy] = None
    ) -> bool:
        """Decide whether an event should be forwarded to Zendesk.

        Args:
            event: Tracker event
            policy: Policy snapshot to decide with; the current one if None

        Returns:
            False for rejected event types and for events made by the
            suppressed actor, True otherwise
        """
        policy = policy or self.configuration.policy

        if event.event_type in REJECTED_EVENT_TYPES:
            logger.debug(
                f"Ignoring {event.event_type} event for {event.issue_key}",
                extra={"event": "filter.rejected", "reason": "event_type"},
            )
            return False

        if policy.suppressed_actor is not None and event.actor == policy.suppressed_actor:
            logger.debug(
                f"Ignoring change to {event.issue_key} made by {event.actor}",
                extra={"event": "filter.rejected", "reason": "suppressed_actor"},
            )
            return False

        return True
