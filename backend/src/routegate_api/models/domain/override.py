"""Individual route permission domain model."""

from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, field_validator

from routegate_api.utils.clock import as_utc


class PermissionType(StrEnum):
    """Direction of an individual route override."""

    GRANT = "grant"
    DENY = "deny"


class UserRoutePermission(BaseModel):
    """Per-user grant or deny for a single route."""

    id: UUID
    user_id: UUID
    route_id: UUID
    permission_type: PermissionType
    reason: str | None = None
    is_active: bool = True
    granted_by: UUID | None = None
    expires_at: datetime | None = None

    class Config:
        """Pydantic config."""

        from_attributes = True

    @field_validator("expires_at")
    @classmethod
    def normalize_expires_at(cls, value: datetime | None) -> datetime | None:
        """Store timestamps as timezone-aware UTC."""
        return as_utc(value)

    def is_effective(self, now: datetime) -> bool:
        """Active and either permanent or expiring strictly after ``now``.

        Args:
            now: Timezone-aware reference time

        Returns:
            True if the override currently applies
        """
        if not self.is_active:
            return False
        return self.expires_at is None or self.expires_at > now
