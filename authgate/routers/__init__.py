"""API routers."""

from authgate.routers.auth import router as auth_router

__all__ = ["auth_router"]
