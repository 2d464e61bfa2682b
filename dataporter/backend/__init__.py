from .client import HttpPorterBackend
from .types import (
    FieldMetadataProvider,
    ExportBackend,
    ImportBackend,
    NotificationSink,
    FileSource,
    FileSaver,
    UploadedFile,
    export_filename,
)

__all__ = [
    "HttpPorterBackend",
    "FieldMetadataProvider", "ExportBackend", "ImportBackend",
    "NotificationSink", "FileSource", "FileSaver", "UploadedFile",
    "export_filename",
]
