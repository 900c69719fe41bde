"""Individual user route permission repository."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import or_, select

from routegate_api.exceptions import OverrideNotFoundError
from routegate_api.models.domain.override import PermissionType
from routegate_api.models.orm.user_route_permission import UserRoutePermissionORM
from routegate_api.repositories.base import BaseRepository


class UserRoutePermissionRepository(BaseRepository[UserRoutePermissionORM]):
    """Repository for per-user route grants and denies."""

    model = UserRoutePermissionORM

    async def get_effective_for_user(
        self,
        user_id: UUID,
        now: datetime,
    ) -> list[UserRoutePermissionORM]:
        """Get overrides of a user that are active and not expired.

        Args:
            user_id: User UUID
            now: Reference time for expiry

        Returns:
            List of UserRoutePermissionORM
        """
        result = await self._execute(
            select(UserRoutePermissionORM)
            .where(UserRoutePermissionORM.user_id == user_id)
            .where(UserRoutePermissionORM.is_active.is_(True))
            .where(
                or_(
                    UserRoutePermissionORM.expires_at.is_(None),
                    UserRoutePermissionORM.expires_at > now,
                )
            )
            .order_by(UserRoutePermissionORM.created_at),
            "user_route_permissions.get_effective_for_user",
        )
        return list(result.scalars().all())

    async def create_override(
        self,
        user_id: UUID,
        route_id: UUID,
        permission_type: PermissionType,
        reason: str | None = None,
        granted_by: UUID | None = None,
        expires_at: datetime | None = None,
    ) -> UserRoutePermissionORM:
        """Create a grant or deny override.

        Args:
            user_id: User UUID
            route_id: Route UUID
            permission_type: grant or deny
            reason: Why the override exists
            granted_by: Administrator creating the override
            expires_at: Optional expiry; None means permanent

        Returns:
            Created UserRoutePermissionORM
        """
        return await self.create(
            user_id=user_id,
            route_id=route_id,
            permission_type=PermissionType(permission_type).value,
            reason=reason,
            is_active=True,
            granted_by=granted_by,
            expires_at=expires_at,
        )

    async def expire(self, override_id: UUID, expires_at: datetime) -> UserRoutePermissionORM:
        """Set the expiry of an override.

        Raises:
            OverrideNotFoundError: If the override does not exist
        """
        override = await self.get(override_id)
        if override is None:
            raise OverrideNotFoundError(str(override_id))
        override.expires_at = expires_at
        await self._flush("user_route_permissions.expire")
        return override
