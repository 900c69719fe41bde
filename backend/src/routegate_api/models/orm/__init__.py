"""SQLAlchemy ORM models package."""

from routegate_api.models.orm.base import Base
from routegate_api.models.orm.role import RoleORM
from routegate_api.models.orm.role_language_access import RoleLanguageAccessORM
from routegate_api.models.orm.role_permission import RolePermissionORM
from routegate_api.models.orm.route import RouteORM, RouteTranslationORM
from routegate_api.models.orm.user_role import UserRoleORM
from routegate_api.models.orm.user_route_permission import UserRoutePermissionORM

__all__ = [
    "Base",
    "RoleORM",
    "RoleLanguageAccessORM",
    "RolePermissionORM",
    "RouteORM",
    "RouteTranslationORM",
    "UserRoleORM",
    "UserRoutePermissionORM",
]
