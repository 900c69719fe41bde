"""Single-statement route access check.

The point decision is compiled into one SELECT so it reads every store
atomically, without the gaps between several round trips. It follows the
same identifier rules as the resolution engine: a path is allowed when it
identifies some granted route and no denied route.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import ColumnElement, and_, not_, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from routegate_api.exceptions import DataAccessError
from routegate_api.models.domain.override import PermissionType
from routegate_api.models.orm.role import RoleORM
from routegate_api.models.orm.role_permission import RolePermissionORM
from routegate_api.models.orm.route import RouteORM, RouteTranslationORM
from routegate_api.models.orm.user_role import UserRoleORM
from routegate_api.models.orm.user_route_permission import UserRoutePermissionORM


def _identifies(route, path: str, language_code: str) -> ColumnElement[bool]:
    """Whether ``path`` is the pathname or an active translated path of ``route``."""
    translation = aliased(RouteTranslationORM)
    return or_(
        route.pathname == path,
        select(translation.id)
        .where(translation.route_id == route.id)
        .where(translation.language_code == language_code)
        .where(translation.is_active.is_(True))
        .where(translation.translated_path == path)
        .exists(),
    )


def _effective_override(override, user_id: UUID, permission_type: PermissionType, now: datetime):
    return and_(
        override.user_id == user_id,
        override.permission_type == permission_type.value,
        override.is_active.is_(True),
        or_(override.expires_at.is_(None), override.expires_at > now),
    )


class AccessQueryRepository:
    """Repository answering point access decisions in one query."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session."""
        self.session = session

    def build_statement(
        self,
        user_id: UUID,
        path: str,
        language_code: str,
        now: datetime,
    ):
        """Build the access check SELECT.

        Args:
            user_id: User UUID
            path: Canonical pathname or translated path
            language_code: Language of the translated path
            now: Reference time for override expiry

        Returns:
            SELECT returning a single boolean
        """
        route = aliased(RouteORM)
        role_permission = aliased(RolePermissionORM)
        grant = aliased(UserRoutePermissionORM)

        effective_role_names = (
            select(RoleORM.name)
            .join(UserRoleORM, UserRoleORM.role_id == RoleORM.id)
            .where(UserRoleORM.user_id == user_id)
            .where(UserRoleORM.is_active.is_(True))
            .where(UserRoleORM.revoked_at.is_(None))
            .where(RoleORM.is_active.is_(True))
        )

        role_granted = (
            select(role_permission.id)
            .where(role_permission.route_id == route.id)
            .where(role_permission.is_active.is_(True))
            .where(role_permission.role_name.in_(effective_role_names))
            .exists()
        )
        user_granted = (
            select(grant.id)
            .where(grant.route_id == route.id)
            .where(_effective_override(grant, user_id, PermissionType.GRANT, now))
            .exists()
        )
        allowed = (
            select(route.id)
            .where(route.is_active.is_(True))
            .where(route.deleted_at.is_(None))
            .where(_identifies(route, path, language_code))
            .where(or_(route.is_public.is_(True), role_granted, user_granted))
            .exists()
        )

        denied_route = aliased(RouteORM)
        deny = aliased(UserRoutePermissionORM)
        denied = (
            select(deny.id)
            .join(denied_route, denied_route.id == deny.route_id)
            .where(_effective_override(deny, user_id, PermissionType.DENY, now))
            .where(_identifies(denied_route, path, language_code))
            .exists()
        )

        return select(and_(allowed, not_(denied)))

    async def can_access_route(
        self,
        user_id: UUID,
        path: str,
        language_code: str,
        now: datetime,
    ) -> bool:
        """Decide whether a path is accessible for a user.

        Args:
            user_id: User UUID
            path: Canonical pathname or translated path
            language_code: Language of the translated path
            now: Reference time for override expiry

        Returns:
            True if the path is accessible

        Raises:
            DataAccessError: If the query fails
        """
        statement = self.build_statement(user_id, path, language_code, now)
        try:
            result = await self.session.execute(statement)
        except (SQLAlchemyError, ConnectionError, TimeoutError, OSError) as e:
            raise DataAccessError("can_access_route", e) from e
        return bool(result.scalar())
