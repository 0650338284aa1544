"""Route modules."""

from .auth import router as auth_router
from .items import router as items_router
from .storage import router as storage_router
from .system import router as system_router

__all__ = ["auth_router", "items_router", "storage_router", "system_router"]
