"""API routers module."""

from .schedules import router as schedules_router
from .review import router as review_router

__all__ = [
    "schedules_router",
    "review_router",
]
