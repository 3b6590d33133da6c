"""
Witness lookups and contact.

Note the asymmetry between the two operations: contacting witnesses on a
missing event is a NotFoundError, while counting witnesses on a missing event
returns 0.
"""

from typing import List

from backend.errors import NotFoundError, ValidationError


class WitnessService:
    def __init__(self, subscriptions, events, notifier):
        self.subscriptions = subscriptions
        self.events = events
        self.notifier = notifier

    def contact_witnesses(self, event_id: int, message: str) -> List[str]:
        """
        Send a message to every user subscribed to an event.

        Returns:
            list: The email addresses the message was dispatched to.

        Raises:
            ValidationError: Empty message, or nobody subscribed.
            NotFoundError: The event does not exist.
        """
        if not message:
            raise ValidationError("message is required")

        if self.events.get(event_id) is None:
            raise NotFoundError("event not found")

        subscribers = self.subscriptions.subscribers(event_id)
        if not subscribers:
            raise ValidationError("no witnesses subscribed to this event")

        emails = [s.email for s in subscribers]
        self.notifier.dispatch(event_id, emails, message)
        return emails

    def witness_count(self, event_id: int) -> int:
        """Number of subscribers; no existence check on the event."""
        return len(self.subscriptions.subscribers(event_id))
