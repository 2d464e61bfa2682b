from .field_DTO import FieldDescriptor, OrderedField
from .preview_DTO import PreviewCell, PreviewRow, PreviewTable
from .import_outcome_DTO import ImportOutcome
from .notification_DTO import Notification, Severity
from .porter_DTO import ExportResult, ExportState, ImportReport, ImportState


__all__ = [
    "FieldDescriptor", "OrderedField",
    "PreviewCell", "PreviewRow", "PreviewTable",
    "ImportOutcome",
    "Notification", "Severity",
    "ExportResult", "ExportState", "ImportReport", "ImportState",
]
