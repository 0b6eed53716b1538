"""API route modules."""

from .auth import router as auth_router
from .health import router as health_router
from .tempestive import router as tempestive_router
from .users import router as users_router

__all__ = ["auth_router", "health_router", "tempestive_router", "users_router"]
