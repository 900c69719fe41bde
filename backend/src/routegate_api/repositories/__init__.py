"""Repositories package."""

from routegate_api.repositories.access_query import AccessQueryRepository
from routegate_api.repositories.base import BaseRepository
from routegate_api.repositories.role_language_access_repository import (
    RoleLanguageAccessRepository,
)
from routegate_api.repositories.role_permission_repository import RolePermissionRepository
from routegate_api.repositories.role_repository import RoleRepository
from routegate_api.repositories.route_repository import RouteRepository
from routegate_api.repositories.user_role_repository import UserRoleRepository
from routegate_api.repositories.user_route_permission_repository import (
    UserRoutePermissionRepository,
)

__all__ = [
    "AccessQueryRepository",
    "BaseRepository",
    "RoleLanguageAccessRepository",
    "RolePermissionRepository",
    "RoleRepository",
    "RouteRepository",
    "UserRoleRepository",
    "UserRoutePermissionRepository",
]
