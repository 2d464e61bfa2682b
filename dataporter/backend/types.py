from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence, runtime_checkable

from dataporter.v1_0.entities import FieldDescriptor, ImportOutcome, Notification


@runtime_checkable
class FieldMetadataProvider(Protocol):
    async def resolve_object_type(self, record_id: str) -> str: ...

    async def list_fields(self, object_type: str) -> List[FieldDescriptor]: ...


@runtime_checkable
class ExportBackend(Protocol):
    async def export_records(
        self,
        object_type: str,
        field_api_names: Sequence[str],
        record_id: Optional[str] = None,
    ) -> str:
        """Returns the CSV file as a base64 transfer payload."""
        ...


@runtime_checkable
class ImportBackend(Protocol):
    async def import_records(self, object_type: str, payload: str) -> ImportOutcome: ...


@runtime_checkable
class NotificationSink(Protocol):
    async def notify(self, notification: Notification) -> None: ...


@runtime_checkable
class FileSource(Protocol):
    filename: Optional[str]

    async def read(self) -> bytes: ...


@runtime_checkable
class FileSaver(Protocol):
    async def save(self, filename: str, payload: str) -> None: ...


def export_filename(object_type: str) -> str:
    return f"{object_type}_export.csv"


@dataclass(slots=True)
class UploadedFile:
    """FileSource over content already received in memory."""
    filename: Optional[str]
    content: bytes

    async def read(self) -> bytes:
        return self.content
