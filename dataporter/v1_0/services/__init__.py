from .notification_service import RealtimeNotifier
from .porter_service import (
    PorterService,
    classify_outcome,
    outcome_notification,
    rejection_message,
)
from .session_registry import PorterSessionRegistry

__all__ = [
    "RealtimeNotifier",
    "PorterService",
    "classify_outcome",
    "outcome_notification",
    "rejection_message",
    "PorterSessionRegistry",
]
