from dependency_injector import containers, providers

from dataporter.backend import HttpPorterBackend
from dataporter.core.realtime import manager
from dataporter.core.settings import settings
from dataporter.v1_0.services import PorterSessionRegistry


class APIContainer(containers.DeclarativeContainer):
    porter_backend = providers.Singleton(HttpPorterBackend)
    realtime_manager = providers.Object(manager)

    session_registry = providers.Singleton(
        PorterSessionRegistry,
        metadata_provider = porter_backend,
        export_backend = porter_backend,
        import_backend = porter_backend,
        manager = realtime_manager,
        preview_max_rows = settings.PREVIEW_MAX_ROWS,
        max_sessions = settings.MAX_SESSIONS,
        idle_ttl_sec = settings.SESSION_IDLE_TTL_SEC,
    )
