"""Role language access repository."""

from uuid import UUID

from sqlalchemy import select

from routegate_api.exceptions import NotFoundError
from routegate_api.models.orm.role_language_access import RoleLanguageAccessORM
from routegate_api.repositories.base import BaseRepository


class RoleLanguageAccessRepository(BaseRepository[RoleLanguageAccessORM]):
    """Repository for UI languages granted to roles."""

    model = RoleLanguageAccessORM

    async def get_active_for_roles(self, role_names: set[str]) -> list[RoleLanguageAccessORM]:
        """Get active language grants of the given roles.

        Args:
            role_names: Role names

        Returns:
            List of RoleLanguageAccessORM
        """
        if not role_names:
            return []
        result = await self._execute(
            select(RoleLanguageAccessORM)
            .where(RoleLanguageAccessORM.role_name.in_(role_names))
            .where(RoleLanguageAccessORM.is_active.is_(True)),
            "role_language_access.get_active_for_roles",
        )
        return list(result.scalars().all())

    async def grant(
        self,
        role_name: str,
        language_code: str,
        created_by: UUID | None = None,
    ) -> RoleLanguageAccessORM:
        """Allow a role to use a UI language."""
        return await self.create(
            role_name=role_name,
            language_code=language_code,
            is_active=True,
            created_by=created_by,
        )

    async def deactivate(self, access_id: UUID) -> RoleLanguageAccessORM:
        """Deactivate a language grant.

        Raises:
            NotFoundError: If the grant does not exist
        """
        access = await self.get(access_id)
        if access is None:
            raise NotFoundError("Role language access not found", {"access_id": str(access_id)})
        access.is_active = False
        await self._flush("role_language_access.deactivate")
        return access
