"""API routers."""

from .shift import router as shift_router

__all__ = ["shift_router"]
