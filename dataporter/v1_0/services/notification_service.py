from dataclasses import asdict

from dataporter.core.logger import logger
from dataporter.core.realtime import ConnectionManager, build_event
from dataporter.v1_0.entities import Notification, Severity

_LEVELS = {
    Severity.INFO: "info",
    Severity.SUCCESS: "info",
    Severity.WARNING: "warning",
    Severity.ERROR: "error",
}


class RealtimeNotifier:
    """Notification sink that logs and pushes toasts to a session's websocket channel."""

    def __init__(self, manager: ConnectionManager, channel_id: str) -> None:
        self.manager = manager
        self.channel_id = channel_id

    async def notify(self, notification: Notification) -> None:
        log = getattr(logger, _LEVELS[notification.severity])
        log("[Notify] channel=%s %s: %s", self.channel_id, notification.title, notification.message)
        await self.manager.broadcast(
            self.channel_id,
            build_event("porter", "notification", asdict(notification)),
        )
