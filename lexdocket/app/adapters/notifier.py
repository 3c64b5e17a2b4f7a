"""Notification adapter that writes reminders to the application log."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from lexdocket.app.ports import DeliveryChannel, NotificationPort

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Delivery:
    channel: DeliveryChannel
    recipient: str
    message: str


@dataclass(slots=True)
class LogNotifier(NotificationPort):
    """Log each reminder instead of sending it and report it as delivered.

    Deliveries are also kept in :attr:`deliveries` for inspection.
    """

    deliveries: list[Delivery] = field(default_factory=list)

    def send(self, channel: DeliveryChannel, recipient: str, message: str) -> bool:
        logger.info("Reminder [%s] to %s: %s", channel, recipient, message)
        self.deliveries.append(Delivery(channel=channel, recipient=recipient, message=message))
        return True
