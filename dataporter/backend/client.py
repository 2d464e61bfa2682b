from typing import Any, Dict, List, Optional, Sequence

import httpx
from pydantic import ValidationError as SchemaError

from dataporter.core.errors import BackendCallError
from dataporter.core.logger import logger
from dataporter.core.settings import settings
from dataporter.v1_0.entities import FieldDescriptor, ImportOutcome
from dataporter.v1_0.schemas import BackendErrorBody, FieldOut, ImportResultIn


class HttpPorterBackend:
    """
    Field metadata provider plus export/import backend over a JSON REST API.

    Each action is a POST to `<base_url>/<action>` with a JSON body, mirroring
    the controller methods of the bulk-data service.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base = (base_url or settings.BACKEND_URL).rstrip("/")
        self.headers = headers if headers is not None else settings.BACKEND_HEADERS
        self.timeout = timeout or settings.BACKEND_TIMEOUT_SEC
        self._transport = transport

    @staticmethod
    def _error_message(r: httpx.Response) -> str:
        """
        Extract the backend's error message.

        Accepts `{"message": ...}` or a list of such objects (first wins);
        falls back to the raw body text.
        """
        try:
            data: Any = r.json()
        except ValueError:
            return r.text or f"HTTP {r.status_code}"
        if isinstance(data, list) and data:
            data = data[0]
        if isinstance(data, dict):
            try:
                body = BackendErrorBody.model_validate(data)
            except SchemaError:
                logger.debug("[HttpPorterBackend] unexpected error body shape status=%s", r.status_code)
                return r.text or f"HTTP {r.status_code}"
            if body.message:
                return body.message
        return r.text or f"HTTP {r.status_code}"

    async def _call(self, action: str, payload: Dict[str, Any]) -> Any:
        """
        POST one action and return the decoded JSON body.

        Raises:
            BackendCallError: On non-2xx responses or a non-JSON body.
            httpx.HTTPError: On network failures.
        """
        url = f"{self.base}/{action}"
        logger.debug("[HttpPorterBackend] POST %s", url)
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            r = await client.post(url, json=payload, headers=self.headers)
        if r.status_code >= 300:
            raise BackendCallError(self._error_message(r), status_code=r.status_code)
        try:
            return r.json()
        except ValueError:
            raise BackendCallError(f"{action}: response is not JSON", status_code=r.status_code)

    async def resolve_object_type(self, record_id: str) -> str:
        data = await self._call("getObjectApiNameFromRecordId", {"recordId": record_id})
        if isinstance(data, dict):
            data = data.get("objectName")
        if not isinstance(data, str) or not data:
            raise BackendCallError(f"No object type found for record {record_id}")
        return data

    async def list_fields(self, object_type: str) -> List[FieldDescriptor]:
        data = await self._call("listFields", {"objectName": object_type})
        if not isinstance(data, list):
            raise BackendCallError(f"listFields: unexpected type {type(data).__name__}")
        try:
            return [FieldOut.model_validate(item).to_descriptor() for item in data]
        except SchemaError as e:
            raise BackendCallError(f"listFields: invalid field entry ({e.error_count()} errors)")

    async def export_records(
        self,
        object_type: str,
        field_api_names: Sequence[str],
        record_id: Optional[str] = None,
    ) -> str:
        data = await self._call(
            "exportCsv",
            {"objectName": object_type, "fields": list(field_api_names), "recordId": record_id},
        )
        if not isinstance(data, str):
            raise BackendCallError(f"exportCsv: unexpected type {type(data).__name__}")
        return data

    async def import_records(self, object_type: str, payload: str) -> ImportOutcome:
        data = await self._call("importCsv", {"objectName": object_type, "base64Csv": payload})
        try:
            return ImportResultIn.model_validate(data).to_outcome()
        except SchemaError as e:
            raise BackendCallError(f"importCsv: invalid result ({e.error_count()} errors)")
