"""Centralized dependency injection factories for FastAPI."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from routegate_api.database import get_db
from routegate_api.services.route_access_service import RouteAccessService


def get_route_access_service(db: AsyncSession = Depends(get_db)) -> RouteAccessService:
    """Get RouteAccessService instance."""
    return RouteAccessService(db)
