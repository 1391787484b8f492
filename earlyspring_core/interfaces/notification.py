"""
Notification Interface - System notification contract.
"""

from abc import ABC, abstractmethod

from earlyspring_core.models.notification import AlarmNotification, PermissionState


class NotificationPort(ABC):
    """
    Abstract interface for platform notifications.

    A denied permission only skips the notification; it never fails the
    alarm trigger.

    Example:
        >>> if await notifications.request_permission() is PermissionState.GRANTED:
        ...     await notifications.show(notification)
    """

    @abstractmethod
    async def request_permission(self) -> PermissionState:
        """
        Ask the platform for permission to notify.

        Returns:
            GRANTED or DENIED
        """
        pass

    @abstractmethod
    async def show(self, notification: AlarmNotification) -> None:
        """
        Display a notification.

        Args:
            notification: Notification payload

        Raises:
            NotificationError: If the platform rejects the notification
        """
        pass
