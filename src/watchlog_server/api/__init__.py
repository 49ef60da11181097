"""API routers."""

from .alerts import router as alerts_router
from .auth import router as auth_router
from .entries import router as entries_router
from .search import router as search_router
from .series import router as series_router

__all__ = ["alerts_router", "auth_router", "entries_router", "search_router", "series_router"]
