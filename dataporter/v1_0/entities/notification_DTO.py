from dataclasses import dataclass
from enum import StrEnum


class Severity(StrEnum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Notification:
    """Toast-style message for the notification sink."""
    title: str
    message: str
    severity: Severity = Severity.INFO
    sticky: bool = False
