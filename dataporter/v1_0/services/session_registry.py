import time
import uuid
from typing import Callable, Dict, List, Optional

from dataporter.backend.types import ExportBackend, FieldMetadataProvider, ImportBackend
from dataporter.core.logger import logger
from dataporter.core.realtime import ConnectionManager
from .notification_service import RealtimeNotifier
from .porter_service import PorterService


class PorterSessionRegistry:
    """
    In-memory porter sessions keyed by id. Sessions share no state.

    Sessions idle for longer than `idle_ttl_sec` are evicted, and the least
    recently used ones go first once `max_sessions` is reached. Both checks
    run when a session is created.
    """

    def __init__(
        self,
        metadata_provider: FieldMetadataProvider,
        export_backend: ExportBackend,
        import_backend: ImportBackend,
        manager: ConnectionManager,
        preview_max_rows: int,
        max_sessions: int = 500,
        idle_ttl_sec: float = 1800.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.metadata_provider = metadata_provider
        self.export_backend = export_backend
        self.import_backend = import_backend
        self.manager = manager
        self.preview_max_rows = preview_max_rows
        self.max_sessions = max_sessions
        self.idle_ttl_sec = idle_ttl_sec
        self._clock = clock
        self._sessions: Dict[str, PorterService] = {}
        self._last_seen: Dict[str, float] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def _stale_ids(self) -> List[str]:
        now = self._clock()
        expired = {sid for sid, seen in self._last_seen.items() if now - seen > self.idle_ttl_sec}
        live = sorted(
            (sid for sid in self._last_seen if sid not in expired),
            key=self._last_seen.__getitem__,
        )
        # keep room for the session about to be created
        overflow = len(live) - self.max_sessions + 1
        return sorted(expired) + live[:max(overflow, 0)]

    async def _evict(self) -> None:
        for session_id in self._stale_ids():
            logger.info("[PorterSessionRegistry] evicting session=%s", session_id)
            await self.discard(session_id)

    async def create(self) -> tuple[str, PorterService]:
        await self._evict()
        session_id = uuid.uuid4().hex
        session = PorterService(
            metadata_provider=self.metadata_provider,
            export_backend=self.export_backend,
            import_backend=self.import_backend,
            notifier=RealtimeNotifier(self.manager, session_id),
            preview_max_rows=self.preview_max_rows,
        )
        self._sessions[session_id] = session
        self._last_seen[session_id] = self._clock()
        logger.debug("[PorterSessionRegistry] created session=%s total=%s", session_id, len(self._sessions))
        return session_id, session

    def get(self, session_id: str) -> Optional[PorterService]:
        session = self._sessions.get(session_id)
        if session is not None:
            self._last_seen[session_id] = self._clock()
        return session

    async def discard(self, session_id: str) -> bool:
        await self.manager.close_channel(session_id)
        self._last_seen.pop(session_id, None)
        return self._sessions.pop(session_id, None) is not None
