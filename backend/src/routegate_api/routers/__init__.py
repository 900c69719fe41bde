"""API routers package."""

from routegate_api.routers import access

__all__ = ["access"]
