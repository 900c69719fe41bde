"""Role route permission repository."""

from uuid import UUID

from sqlalchemy import select

from routegate_api.exceptions import NotFoundError
from routegate_api.models.orm.role_permission import RolePermissionORM
from routegate_api.repositories.base import BaseRepository


class RolePermissionRepository(BaseRepository[RolePermissionORM]):
    """Repository for routes granted to roles."""

    model = RolePermissionORM

    async def get_active_for_roles(self, role_names: set[str]) -> list[RolePermissionORM]:
        """Get active route grants of the given roles.

        Args:
            role_names: Role names

        Returns:
            List of RolePermissionORM
        """
        if not role_names:
            return []
        result = await self._execute(
            select(RolePermissionORM)
            .where(RolePermissionORM.role_name.in_(role_names))
            .where(RolePermissionORM.is_active.is_(True)),
            "route_permissions.get_active_for_roles",
        )
        return list(result.scalars().all())

    async def grant(
        self,
        role_name: str,
        route_id: UUID,
        created_by: UUID | None = None,
    ) -> RolePermissionORM:
        """Grant a route to a role.

        Args:
            role_name: Role name
            route_id: Route UUID
            created_by: Administrator creating the grant

        Returns:
            Created RolePermissionORM
        """
        return await self.create(
            role_name=role_name,
            route_id=route_id,
            is_active=True,
            created_by=created_by,
        )

    async def deactivate(self, permission_id: UUID) -> RolePermissionORM:
        """Deactivate a role route grant.

        Raises:
            NotFoundError: If the grant does not exist
        """
        permission = await self.get(permission_id)
        if permission is None:
            raise NotFoundError("Role permission not found", {"permission_id": str(permission_id)})
        permission.is_active = False
        await self._flush("route_permissions.deactivate")
        return permission
