import asyncio
from typing import List, Optional, Sequence

import pytest

from dataporter.v1_0.entities import FieldDescriptor, ImportOutcome, Notification
from dataporter.v1_0.helper.io import to_transfer_payload
from dataporter.v1_0.services import PorterService

ACCOUNT_FIELDS = [
    FieldDescriptor(label="Account Name", api_name="Name"),
    FieldDescriptor(label="Phone", api_name="Phone"),
    FieldDescriptor(label="Industry", api_name="Industry"),
    FieldDescriptor(label="Website", api_name="Website"),
]

EXPORT_CSV = b"Name,Phone\nAcme,555-0100\n"


class FakeBackend:
    """In-memory metadata provider + export/import backend recording its calls."""

    def __init__(
        self,
        object_type: str = "Account",
        fields: Optional[List[FieldDescriptor]] = None,
        outcome: Optional[ImportOutcome] = None,
    ) -> None:
        self.object_type = object_type
        self.fields = list(ACCOUNT_FIELDS if fields is None else fields)
        self.export_payload = to_transfer_payload(EXPORT_CSV)
        self.outcome = outcome or ImportOutcome(succeeded=True, inserted_count=5, failed_count=0)
        self.provider_error: Optional[Exception] = None
        self.export_error: Optional[Exception] = None
        self.import_error: Optional[Exception] = None
        self.gate: Optional[asyncio.Event] = None
        self.calls: list = []

    async def _wait(self) -> None:
        if self.gate is not None:
            await self.gate.wait()

    async def resolve_object_type(self, record_id: str) -> str:
        self.calls.append(("resolve", record_id))
        if self.provider_error:
            raise self.provider_error
        return self.object_type

    async def list_fields(self, object_type: str) -> List[FieldDescriptor]:
        self.calls.append(("list_fields", object_type))
        if self.provider_error:
            raise self.provider_error
        return list(self.fields)

    async def export_records(self, object_type: str, field_api_names: Sequence[str], record_id=None) -> str:
        self.calls.append(("export", object_type, list(field_api_names), record_id))
        await self._wait()
        if self.export_error:
            raise self.export_error
        return self.export_payload

    async def import_records(self, object_type: str, payload: str) -> ImportOutcome:
        self.calls.append(("import", object_type, payload))
        await self._wait()
        if self.import_error:
            raise self.import_error
        return self.outcome

    def called(self, name: str) -> list:
        return [c for c in self.calls if c[0] == name]


class RecordingNotifier:
    def __init__(self) -> None:
        self.notifications: List[Notification] = []

    async def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    @property
    def last(self) -> Notification:
        return self.notifications[-1]


class RecordingSaver:
    def __init__(self) -> None:
        self.saved: list = []

    async def save(self, filename: str, payload: str) -> None:
        self.saved.append((filename, payload))


class MemoryFile:
    def __init__(self, content: bytes, filename: str = "accounts.csv", gate: Optional[asyncio.Event] = None) -> None:
        self.filename = filename
        self.content = content
        self.gate = gate

    async def read(self) -> bytes:
        if self.gate is not None:
            await self.gate.wait()
        return self.content


class BrokenFile:
    filename = "broken.csv"

    async def read(self) -> bytes:
        raise OSError("permission denied")


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def saver() -> RecordingSaver:
    return RecordingSaver()


@pytest.fixture
def porter(backend, notifier, saver) -> PorterService:
    return PorterService(
        metadata_provider=backend,
        export_backend=backend,
        import_backend=backend,
        notifier=notifier,
        file_saver=saver,
    )
