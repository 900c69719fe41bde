"""Domain models package."""

from routegate_api.models.domain.access import (
    AccessResolution,
    AccessSnapshot,
    MenuEntry,
    NavigationDecision,
    UserPermissionSummary,
)
from routegate_api.models.domain.override import PermissionType, UserRoutePermission
from routegate_api.models.domain.role import Role, RoleLanguageAccess, UserRoleAssignment
from routegate_api.models.domain.route import RolePermission, Route, RouteTranslation

__all__ = [
    "AccessResolution",
    "AccessSnapshot",
    "MenuEntry",
    "NavigationDecision",
    "PermissionType",
    "Role",
    "RoleLanguageAccess",
    "RolePermission",
    "Route",
    "RouteTranslation",
    "UserPermissionSummary",
    "UserRoleAssignment",
    "UserRoutePermission",
]
