"""Desktop notifications when the charger is switched."""

import logging

from notifypy import Notify

from .constants import ROOT_LOGGER_NAME

LOGGER = logging.getLogger(ROOT_LOGGER_NAME)

APPLICATION_NAME = "Charge Assistant"


class DesktopNotifier:
    """Show a desktop notification for each switch action."""

    def __init__(self, application_name: str = APPLICATION_NAME) -> None:
        """Create a DesktopNotifier instance."""
        self._application_name = application_name

    def notify(self, title: str, message: str, urgency: str = "normal") -> None:
        """Show a notification. Failures are logged, never raised."""
        try:
            notification = Notify(default_notification_application_name=self._application_name)
            notification.title = title
            notification.message = message
            notification.urgency = urgency
            notification.send(block=False)
        except Exception as error:  # noqa: BLE001
            LOGGER.warning("Failed to show notification '%s': %s", title, error)
