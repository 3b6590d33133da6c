"""
Witness notification dispatch.

Delivery is not implemented: the production notifier logs who would be
contacted and with what message. A real provider (email/SMS) only needs to
offer the same `dispatch` method.
"""

import logging
from typing import Sequence

logger = logging.getLogger(__name__)


class LogNotifier:
    def dispatch(self, event_id: int, recipients: Sequence[str], message: str) -> int:
        """
        Record a witness contact for an event.

        Args:
            event_id (int): Event the witnesses are subscribed to.
            recipients (list): Email addresses of the subscribed witnesses.
            message (str): Text from the advocate.

        Returns:
            int: Number of recipients handed to the transport.
        """
        logger.info(f"Contacting witnesses for event {event_id}: {list(recipients)}")
        logger.info(f"Message: {message}")
        return len(recipients)
