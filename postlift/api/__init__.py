"""PostLift API routes."""

from postlift.api.attribution import router as attribution_router
from postlift.api.imports import router as imports_router

__all__ = [
    "attribution_router",
    "imports_router",
]
