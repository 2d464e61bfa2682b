from dataclasses import dataclass
from enum import StrEnum
from typing import Optional

from dataporter.core.errors import PorterError
from dataporter.v1_0.helper.io.transfer_codec import from_transfer_payload, to_data_url
from .import_outcome_DTO import ImportOutcome
from .notification_DTO import Notification


class ExportState(StrEnum):
    IDLE = "idle"
    EXPORTING = "exporting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ImportState(StrEnum):
    IDLE = "idle"
    READING = "reading"
    IMPORTING = "importing"
    SUCCEEDED = "succeeded"
    PARTIALLY_FAILED = "partially_failed"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass(slots=True)
class ExportResult:
    """Terminal state of one export attempt plus the file handed to the caller."""
    state: ExportState
    notification: Notification
    filename: Optional[str] = None
    payload: Optional[str] = None
    error: Optional[PorterError] = None

    @property
    def content(self) -> bytes:
        return from_transfer_payload(self.payload or "")

    @property
    def data_url(self) -> Optional[str]:
        return to_data_url(self.payload) if self.payload is not None else None


@dataclass(slots=True)
class ImportReport:
    """Terminal state of one import attempt."""
    state: ImportState
    notification: Notification
    outcome: Optional[ImportOutcome] = None
    error: Optional[PorterError] = None
