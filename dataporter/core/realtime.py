# dataporter/core/realtime.py

from typing import Dict, Set, Any
from fastapi import WebSocket, status
from dataporter.core.logger import logger


class ConnectionManager:
    """
    Manages active WebSocket connections grouped by porter session IDs.
    """

    def __init__(self) -> None:
        self._channels: Dict[str, Set[WebSocket]] = {}

    async def connect(self, channel_id: str, websocket: WebSocket) -> None:
        await websocket.accept()
        if channel_id not in self._channels:
            self._channels[channel_id] = set()
        self._channels[channel_id].add(websocket)
        logger.info("[RT] connected channel=%s total=%s", channel_id, len(self._channels[channel_id]))

    def disconnect(self, channel_id: str, websocket: WebSocket) -> None:
        conns = self._channels.get(channel_id)
        if not conns:
            return
        conns.discard(websocket)
        if not conns:
            self._channels.pop(channel_id, None)

    async def close_channel(self, channel_id: str) -> None:
        """
        Close every socket of a channel with 1001 (going away), then drop it.
        """
        for ws in list(self._channels.get(channel_id, set())):
            try:
                await ws.close(code=status.WS_1001_GOING_AWAY)
            except Exception as e:
                logger.debug("[RT] close failed channel=%s err=%s", channel_id, e)
        self._channels.pop(channel_id, None)
        logger.info("[RT] closed channel=%s", channel_id)

    async def broadcast(self, channel_id: str, message: dict) -> None:
        conns = list(self._channels.get(channel_id, set()))
        if not conns:
            return

        dead: list[WebSocket] = []

        for ws in conns:
            try:
                await ws.send_json(message)
            except Exception as e:
                logger.debug("[RT] send failed channel=%s err=%s", channel_id, e)
                dead.append(ws)

        if dead:
            alive = self._channels.get(channel_id, set())
            if alive:
                for ws in dead:
                    alive.discard(ws)
                if not alive:
                    self._channels.pop(channel_id, None)


manager = ConnectionManager()


def build_event(
    resource: str,
    action: str,
    payload: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Builds the standardized realtime event envelope.
    """
    return {
        "type": f"{resource}.{action}",
        "resource": resource,
        "action": action,
        "payload": payload or {},
    }
