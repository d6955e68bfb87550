"""API routers."""

from server.routers.convert import router as convert_router
from server.routers.projects import router as projects_router

__all__ = ["convert_router", "projects_router"]
