"""
Notification module for the Task Manager
Holds the transient success/error/warning/info messages shown to the user
"""
import asyncio
import itertools
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MS = 5000


class NotificationType(str, Enum):
    """Notification kinds"""
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


_LOG_LEVELS = {
    NotificationType.SUCCESS: logging.INFO,
    NotificationType.INFO: logging.INFO,
    NotificationType.WARNING: logging.WARNING,
    NotificationType.ERROR: logging.WARNING,
}


@dataclass
class Notification:
    id: str
    type: NotificationType
    message: str
    description: Optional[str] = None
    # 0 keeps the notification until dismissed
    duration: int = DEFAULT_DURATION_MS
    dismissible: bool = True


class Notifier:
    """
    Collection of active notifications.

    When created inside a running event loop, notifications with a non-zero
    duration are dismissed automatically once it elapses.
    """

    def __init__(self):
        self._active: Dict[str, Notification] = {}
        self._ids = itertools.count(1)

    @property
    def notifications(self) -> List[Notification]:
        return list(self._active.values())

    def show(
        self,
        type: NotificationType,
        message: str,
        description: Optional[str] = None,
        duration: int = DEFAULT_DURATION_MS,
        dismissible: bool = True,
    ) -> Notification:
        notification = Notification(
            id=f"toast-{next(self._ids)}",
            type=NotificationType(type),
            message=message,
            description=description,
            duration=max(duration, 0),
            dismissible=dismissible,
        )
        self._active[notification.id] = notification
        logger.log(
            _LOG_LEVELS[notification.type],
            "%s: %s%s",
            notification.type.value,
            message,
            f" ({description})" if description else "",
        )

        if notification.duration:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                loop = None
            if loop is not None:
                loop.call_later(notification.duration / 1000, self.dismiss, notification.id)
        return notification

    def success(self, message: str, description: Optional[str] = None, **kwargs) -> Notification:
        return self.show(NotificationType.SUCCESS, message, description, **kwargs)

    def error(self, message: str, description: Optional[str] = None, **kwargs) -> Notification:
        return self.show(NotificationType.ERROR, message, description, **kwargs)

    def warning(self, message: str, description: Optional[str] = None, **kwargs) -> Notification:
        return self.show(NotificationType.WARNING, message, description, **kwargs)

    def info(self, message: str, description: Optional[str] = None, **kwargs) -> Notification:
        return self.show(NotificationType.INFO, message, description, **kwargs)

    def dismiss(self, notification_id: str) -> bool:
        """Remove one notification. Returns False if it was already gone."""
        return self._active.pop(notification_id, None) is not None

    def clear(self) -> None:
        self._active.clear()
