from dataclasses import asdict
from typing import Any, Dict, NoReturn

from fastapi import APIRouter, Depends, File, HTTPException, Path, Response, UploadFile, status
from dependency_injector.wiring import inject, Provide

from dataporter.app_containers import ApplicationContainer
from dataporter.backend import UploadedFile
from dataporter.core.errors import BusyError, PorterError, ValidationError
from dataporter.core.logger import logger
from dataporter.core.settings import settings
from dataporter.v1_0.entities import ExportState, ImportState
from dataporter.v1_0.helper.io import build_preview, decode_text
from dataporter.v1_0.schemas import SelectionUpdate, SessionCreate
from dataporter.v1_0.services import PorterService, PorterSessionRegistry

router = APIRouter(prefix="/porter", tags=["Porter"])

Registry = Depends(Provide[ApplicationContainer.api_container.session_registry])


async def _read_upload(file: UploadFile) -> UploadedFile:
    data = await file.read()
    if len(data) > settings.MAX_UPLOAD_BYTES:
        raise HTTPException(413, f"file exceeds {settings.MAX_UPLOAD_MB}MB")
    ct = (file.content_type or "").split(";")[0].strip().lower()
    if ct and ct not in {"text/csv", "application/csv", "application/vnd.ms-excel", "text/plain", "application/octet-stream"}:
        logger.debug("[PorterRouter] unusual content-type: %s (continuing)", ct)
    return UploadedFile(filename=file.filename, content=data)


def _require(registry: PorterSessionRegistry, session_id: str) -> PorterService:
    s = registry.get(session_id)
    if s is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Session not found.")
    return s


def _raise_for(err: PorterError | None) -> NoReturn:
    if isinstance(err, ValidationError):
        raise HTTPException(422, err.message)
    if isinstance(err, BusyError):
        raise HTTPException(status.HTTP_409_CONFLICT, err.message)
    raise HTTPException(status.HTTP_502_BAD_GATEWAY, err.message if err else "porter operation failed")


def _snapshot(session_id: str, s: PorterService) -> Dict[str, Any]:
    return {
        "session_id": session_id,
        "record_id": s.record_id,
        "object_name": s.object_name,
        "fields": [asdict(f) for f in s.fields],
        "ordered_fields": [asdict(f) for f in s.ordered_fields],
        "selected_fields": list(s.selected_fields),
        "preview": asdict(s.preview),
        "has_preview": s.has_preview,
        "is_exporting": s.is_exporting,
        "is_importing": s.is_importing,
        "export_state": s.export_state,
        "import_state": s.import_state,
        "error": s.last_error,
    }


@router.post("/preview", summary="Preview the first rows of a CSV file")
async def preview_endpoint(file: UploadFile = File(..., description=".csv")):
    upload = await _read_upload(file)
    return asdict(build_preview(decode_text(upload.content), settings.PREVIEW_MAX_ROWS))


@router.post("/sessions", status_code=status.HTTP_201_CREATED, summary="Open a porter session")
@inject
async def create_session(
    payload: SessionCreate,
    registry: PorterSessionRegistry = Registry,
):
    session_id, s = await registry.create()
    await s.load_context(record_id=payload.record_id, object_name=payload.object_name)
    return _snapshot(session_id, s)


@router.get("/sessions/{session_id}")
@inject
async def get_session(session_id: str, registry: PorterSessionRegistry = Registry):
    return _snapshot(session_id, _require(registry, session_id))


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
@inject
async def delete_session(session_id: str, registry: PorterSessionRegistry = Registry):
    if not await registry.discard(session_id):
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Session not found.")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/sessions/{session_id}/selection", summary="Apply a multi-select change")
@inject
async def update_selection(
    session_id: str,
    payload: SelectionUpdate,
    registry: PorterSessionRegistry = Registry,
):
    s = _require(registry, session_id)
    s.select_fields(payload.selected)
    return _snapshot(session_id, s)


@router.post("/sessions/{session_id}/order/{position}/{direction}")
@inject
async def move_field(
    session_id: str,
    position: int = Path(..., ge=0),
    direction: str = Path(..., pattern="^(up|down)$"),
    registry: PorterSessionRegistry = Registry,
):
    s = _require(registry, session_id)
    try:
        if direction == "up":
            s.move_up(position)
        else:
            s.move_down(position)
    except IndexError as e:
        raise HTTPException(status.HTTP_404_NOT_FOUND, str(e))
    return _snapshot(session_id, s)


@router.delete("/sessions/{session_id}/order/{position}")
@inject
async def remove_field(
    session_id: str,
    position: int = Path(..., ge=0),
    registry: PorterSessionRegistry = Registry,
):
    s = _require(registry, session_id)
    try:
        s.remove_field(position)
    except IndexError as e:
        raise HTTPException(status.HTTP_404_NOT_FOUND, str(e))
    return _snapshot(session_id, s)


@router.post("/sessions/{session_id}/file", summary="Choose the CSV file to import")
@inject
async def choose_file(
    session_id: str,
    file: UploadFile = File(..., description=".csv"),
    registry: PorterSessionRegistry = Registry,
):
    s = _require(registry, session_id)
    upload = await _read_upload(file)
    await s.choose_file(upload)
    return _snapshot(session_id, s)


@router.delete("/sessions/{session_id}/file")
@inject
async def clear_file(session_id: str, registry: PorterSessionRegistry = Registry):
    s = _require(registry, session_id)
    s.clear_file()
    return _snapshot(session_id, s)


@router.post(
    "/sessions/{session_id}/export",
    summary="Export records with the ordered fields as columns",
    responses={200: {"content": {"text/csv": {}}}},
)
@inject
async def export_endpoint(session_id: str, registry: PorterSessionRegistry = Registry):
    s = _require(registry, session_id)
    result = await s.export()
    if result.state is not ExportState.SUCCEEDED:
        _raise_for(result.error)
    return Response(
        result.content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{result.filename}"'},
    )


@router.post("/sessions/{session_id}/import", summary="Import the chosen CSV file")
@inject
async def import_endpoint(session_id: str, registry: PorterSessionRegistry = Registry):
    s = _require(registry, session_id)
    report = await s.import_file()
    if report.state in (ImportState.IDLE, ImportState.FAILED):
        _raise_for(report.error)
    return {
        "state": report.state,
        "outcome": asdict(report.outcome) if report.outcome else None,
        "notification": asdict(report.notification),
    }
