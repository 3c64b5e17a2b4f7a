"""Notification transport port interface."""

from typing import Literal, Protocol

DeliveryChannel = Literal["email", "sms", "notification"]


class NotificationPort(Protocol):
    """Port interface for delivering a rendered reminder.

    Side effects: Sends messages (email/SMS/in-app, depending on adapter).
    """

    def send(self, channel: DeliveryChannel, recipient: str, message: str) -> bool:
        """Deliver ``message`` to ``recipient`` over ``channel``.

        Returns:
            True on confirmed delivery, False on transport failure
        """
        ...
