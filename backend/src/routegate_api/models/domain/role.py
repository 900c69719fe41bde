"""Role domain models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, field_validator

from routegate_api.utils.clock import as_utc


class Role(BaseModel):
    """Role domain model."""

    id: UUID
    name: str
    display_name: str
    description: str | None = None
    hierarchy_level: int = 0
    is_active: bool = True
    is_system_role: bool = False

    class Config:
        """Pydantic config."""

        from_attributes = True


class UserRoleAssignment(BaseModel):
    """Assignment of a role to a user, with the role row when it still exists."""

    id: UUID
    user_id: UUID
    role_id: UUID
    is_active: bool = True
    revoked_at: datetime | None = None
    assigned_by: UUID | None = None
    revoked_by: UUID | None = None
    notes: str | None = None
    role: Role | None = None

    class Config:
        """Pydantic config."""

        from_attributes = True

    @field_validator("revoked_at")
    @classmethod
    def normalize_revoked_at(cls, value: datetime | None) -> datetime | None:
        """Store timestamps as timezone-aware UTC."""
        return as_utc(value)

    def is_effective(self) -> bool:
        """Active, not revoked, and pointing at an active role."""
        return (
            self.is_active
            and self.revoked_at is None
            and self.role is not None
            and self.role.is_active
        )


class RoleLanguageAccess(BaseModel):
    """UI language granted to a role."""

    id: UUID
    role_name: str
    language_code: str
    is_active: bool = True

    class Config:
        """Pydantic config."""

        from_attributes = True
