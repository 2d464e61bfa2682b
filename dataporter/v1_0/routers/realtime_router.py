from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status
from dependency_injector.wiring import inject, Provide

from dataporter.app_containers import ApplicationContainer
from dataporter.core.logger import logger
from dataporter.core.realtime import ConnectionManager
from dataporter.v1_0.services import PorterSessionRegistry

router = APIRouter(prefix="/v1/ws", tags=["Realtime"])

@router.websocket("/porter/{session_id}")
@inject
async def websocket_porter(
    websocket: WebSocket,
    session_id: str,
    registry: PorterSessionRegistry = Depends(Provide[ApplicationContainer.api_container.session_registry]),
    manager: ConnectionManager = Depends(Provide[ApplicationContainer.api_container.realtime_manager]),
):
    if registry.get(session_id) is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await manager.connect(session_id, websocket)

    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        manager.disconnect(session_id, websocket)
    except Exception as e:
        logger.warning("[RT] porter channel=%s closed: %s", session_id, e)
        manager.disconnect(session_id, websocket)
        await websocket.close()
