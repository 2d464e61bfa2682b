from .porter_router import router as porter_router
from .realtime_router import router as realtime_router

defined_routers = [
    porter_router,
]

__all__ = ["porter_router", "realtime_router", "defined_routers"]
