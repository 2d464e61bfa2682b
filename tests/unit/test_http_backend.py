"""Tests for the HTTP adapter of the bulk-data backend."""

import json

import httpx
import pytest

from dataporter.backend import HttpPorterBackend
from dataporter.core.errors import BackendCallError
from dataporter.v1_0.entities import FieldDescriptor, ImportOutcome

BASE = "https://backend.test/services/apexrest/dataporter"


def _backend(handler) -> tuple[HttpPorterBackend, list]:
    seen: list = []

    def _record(request: httpx.Request) -> httpx.Response:
        seen.append((request.url.path.rsplit("/", 1)[-1], json.loads(request.content or b"null"), request))
        return handler(request)

    backend = HttpPorterBackend(
        base_url=BASE + "/",
        headers={"Authorization": "Bearer t0k"},
        timeout=5,
        transport=httpx.MockTransport(_record),
    )
    return backend, seen


@pytest.mark.asyncio
async def test_resolve_object_type_posts_record_id():
    backend, seen = _backend(lambda r: httpx.Response(200, json="Account"))

    assert await backend.resolve_object_type("001XYZ") == "Account"
    action, body, request = seen[0]
    assert action == "getObjectApiNameFromRecordId"
    assert body == {"recordId": "001XYZ"}
    assert request.headers["Authorization"] == "Bearer t0k"
    assert str(request.url) == f"{BASE}/getObjectApiNameFromRecordId"


@pytest.mark.asyncio
async def test_resolve_object_type_accepts_object_body():
    backend, _ = _backend(lambda r: httpx.Response(200, json={"objectName": "Contact"}))

    assert await backend.resolve_object_type("003XYZ") == "Contact"


@pytest.mark.asyncio
async def test_list_fields_maps_to_descriptors():
    fields = [{"label": "Account Name", "api": "Name"}, {"label": "", "api": "Phone"}]
    backend, seen = _backend(lambda r: httpx.Response(200, json=fields))

    result = await backend.list_fields("Account")

    assert result == [
        FieldDescriptor(label="Account Name", api_name="Name"),
        FieldDescriptor(label="Phone", api_name="Phone"),
    ]
    assert seen[0][1] == {"objectName": "Account"}


@pytest.mark.asyncio
async def test_list_fields_rejects_malformed_entries():
    backend, _ = _backend(lambda r: httpx.Response(200, json=[{"label": "No api"}]))

    with pytest.raises(BackendCallError):
        await backend.list_fields("Account")


@pytest.mark.asyncio
async def test_export_records_sends_ordered_fields():
    backend, seen = _backend(lambda r: httpx.Response(200, json="TmFtZQo="))

    payload = await backend.export_records("Account", ("Phone", "Name"), None)

    assert payload == "TmFtZQo="
    assert seen[0][0] == "exportCsv"
    assert seen[0][1] == {"objectName": "Account", "fields": ["Phone", "Name"], "recordId": None}


@pytest.mark.asyncio
async def test_import_records_parses_result():
    result = {"success": True, "inserted": 3, "failed": 2, "errors": ["row 2: bad"]}
    backend, seen = _backend(lambda r: httpx.Response(200, json=result))

    outcome = await backend.import_records("Account", "YSxi")

    assert outcome == ImportOutcome(succeeded=True, inserted_count=3, failed_count=2, errors=["row 2: bad"])
    assert seen[0][1] == {"objectName": "Account", "base64Csv": "YSxi"}


@pytest.mark.asyncio
async def test_import_rejection_without_counts():
    backend, _ = _backend(lambda r: httpx.Response(200, json={"success": False, "errors": None}))

    outcome = await backend.import_records("Account", "YSxi")

    assert outcome == ImportOutcome(succeeded=False, inserted_count=0, failed_count=0, errors=[])


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response, message",
    [
        (httpx.Response(400, json=[{"message": "Invalid field: Foo", "errorCode": "INVALID_FIELD"}]), "Invalid field: Foo"),
        (httpx.Response(500, json={"message": "Apex CPU time limit exceeded"}), "Apex CPU time limit exceeded"),
        (httpx.Response(502, text="Bad Gateway"), "Bad Gateway"),
        (
            httpx.Response(500, content=b'{"message": {"detail": "Apex CPU limit"}}'),
            '{"message": {"detail": "Apex CPU limit"}}',
        ),
    ],
)
async def test_error_responses_carry_backend_message(response, message):
    backend, _ = _backend(lambda r: response)

    with pytest.raises(BackendCallError) as exc:
        await backend.export_records("Account", ["Name"])

    assert exc.value.message == message
    assert exc.value.status_code == response.status_code


@pytest.mark.asyncio
async def test_non_json_success_body_is_an_error():
    backend, _ = _backend(lambda r: httpx.Response(200, text="<html>login</html>"))

    with pytest.raises(BackendCallError):
        await backend.list_fields("Account")


@pytest.mark.asyncio
async def test_unexpected_error_body_still_raises_backend_call_error():
    body = b'{"message": {"detail": "Apex CPU limit"}}'
    backend, _ = _backend(lambda r: httpx.Response(500, content=body))

    with pytest.raises(BackendCallError) as exc:
        await backend.list_fields("Account")

    assert exc.value.message == body.decode()
    assert exc.value.status_code == 500
