"""Services package."""

from routegate_api.services.route_access_service import RouteAccessService

__all__ = [
    "RouteAccessService",
]
