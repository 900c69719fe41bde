"""Role repository."""

from uuid import UUID

from sqlalchemy import select

from routegate_api.exceptions import CannotModifySystemRoleError, RoleNotFoundError
from routegate_api.models.orm.role import RoleORM
from routegate_api.repositories.base import BaseRepository


class RoleRepository(BaseRepository[RoleORM]):
    """Repository for role operations."""

    model = RoleORM

    async def get_by_name(self, name: str) -> RoleORM | None:
        """Get role by name.

        Args:
            name: Role name (slug)

        Returns:
            RoleORM or None if not found
        """
        result = await self._execute(
            select(RoleORM).where(RoleORM.name == name),
            "roles.get_by_name",
        )
        return result.scalar_one_or_none()

    async def create_role(
        self,
        name: str,
        display_name: str,
        description: str | None = None,
        hierarchy_level: int = 0,
        is_system_role: bool = False,
        created_by: UUID | None = None,
    ) -> RoleORM:
        """Create a new role.

        Args:
            name: Role slug, stored lowercase
            display_name: Human-readable name
            description: Role description
            hierarchy_level: Ordering metadata
            is_system_role: Whether the role is protected from edits
            created_by: Administrator creating the role

        Returns:
            Created RoleORM
        """
        return await self.create(
            name=name.lower(),
            display_name=display_name,
            description=description,
            hierarchy_level=hierarchy_level,
            is_active=True,
            is_system_role=is_system_role,
            created_by=created_by,
        )

    async def deactivate(self, role_id: UUID) -> RoleORM:
        """Deactivate a role.

        Assignments to an inactive role stop being effective immediately.

        Args:
            role_id: Role UUID

        Returns:
            Updated RoleORM

        Raises:
            RoleNotFoundError: If the role does not exist
            CannotModifySystemRoleError: If the role is a system role
        """
        role = await self.get(role_id)
        if role is None:
            raise RoleNotFoundError(role_id=str(role_id))
        if role.is_system_role:
            raise CannotModifySystemRoleError(role.name)
        role.is_active = False
        await self._flush("roles.deactivate")
        return role
