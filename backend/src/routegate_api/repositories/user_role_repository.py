"""User role assignment repository."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from routegate_api.exceptions import AssignmentNotFoundError
from routegate_api.models.orm.role import RoleORM
from routegate_api.models.orm.user_role import UserRoleORM
from routegate_api.repositories.base import BaseRepository


class UserRoleRepository(BaseRepository[UserRoleORM]):
    """Repository for user-role assignments."""

    model = UserRoleORM

    async def get_effective_for_user(self, user_id: UUID) -> list[UserRoleORM]:
        """Get assignments that currently grant a role to the user.

        An assignment is effective when it is active, not revoked, and
        its role is active.

        Args:
            user_id: User UUID

        Returns:
            List of UserRoleORM with the role loaded
        """
        result = await self._execute(
            select(UserRoleORM)
            .join(RoleORM, RoleORM.id == UserRoleORM.role_id)
            .options(selectinload(UserRoleORM.role))
            .where(UserRoleORM.user_id == user_id)
            .where(UserRoleORM.is_active.is_(True))
            .where(UserRoleORM.revoked_at.is_(None))
            .where(RoleORM.is_active.is_(True)),
            "user_roles.get_effective_for_user",
        )
        return list(result.scalars().all())

    async def get_history_for_user(self, user_id: UUID) -> list[UserRoleORM]:
        """Get every assignment of the user, including revoked ones.

        Args:
            user_id: User UUID

        Returns:
            List of UserRoleORM, newest first
        """
        result = await self._execute(
            select(UserRoleORM)
            .options(selectinload(UserRoleORM.role))
            .where(UserRoleORM.user_id == user_id)
            .order_by(UserRoleORM.created_at.desc()),
            "user_roles.get_history_for_user",
        )
        return list(result.scalars().all())

    async def assign(
        self,
        user_id: UUID,
        role_id: UUID,
        assigned_by: UUID | None = None,
        notes: str | None = None,
    ) -> UserRoleORM:
        """Grant a role to a user.

        Args:
            user_id: User UUID
            role_id: Role UUID
            assigned_by: Administrator granting the role
            notes: Free-form notes

        Returns:
            Created UserRoleORM
        """
        return await self.create(
            user_id=user_id,
            role_id=role_id,
            is_active=True,
            assigned_by=assigned_by,
            notes=notes,
        )

    async def revoke(
        self,
        assignment_id: UUID,
        revoked_at: datetime,
        revoked_by: UUID | None = None,
    ) -> UserRoleORM:
        """Revoke an assignment, keeping the row for auditing.

        Args:
            assignment_id: Assignment UUID
            revoked_at: Revocation timestamp
            revoked_by: Administrator revoking the role

        Returns:
            Updated UserRoleORM

        Raises:
            AssignmentNotFoundError: If the assignment does not exist
        """
        assignment = await self.get(assignment_id)
        if assignment is None:
            raise AssignmentNotFoundError(str(assignment_id))
        assignment.is_active = False
        assignment.revoked_at = revoked_at
        assignment.revoked_by = revoked_by
        await self._flush("user_roles.revoke")
        return assignment
