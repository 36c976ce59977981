from battlediary.api.export import router as export_router
from battlediary.api.health import router as health_router

__all__ = [
    "export_router",
    "health_router",
]
