"""
API v1 routes package.
"""

from .user_routes import router as user_router
from .onboarding_routes import router as onboarding_router
from .admin_routes import router as admin_router
from .webhook_routes import router as webhook_router

__all__ = [
    "user_router",
    "onboarding_router",
    "admin_router",
    "webhook_router",
]
