"""
API route modules.

Each module defines routes for one domain area.
"""

from routes.auth import router as auth_router
from routes.imports import router as imports_router

__all__ = [
    "auth_router",
    "imports_router",
]
