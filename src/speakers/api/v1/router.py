"""V1 API routers."""

from speakers.api.v1.speakers.router import router as speakers_router
from speakers.api.v1.system.router import router as system_router

__all__ = ["speakers_router", "system_router"]
