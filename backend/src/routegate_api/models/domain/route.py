"""Route domain models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, field_validator

from routegate_api.utils.clock import as_utc


class Route(BaseModel):
    """Route domain model."""

    id: UUID
    pathname: str
    display_name: str
    description: str | None = None
    icon: str | None = None
    show_in_menu: bool = False
    menu_order: int = 0
    parent_route_id: UUID | None = None
    is_active: bool = True
    is_public: bool = False
    requires_verification: bool = False
    deleted_at: datetime | None = None

    class Config:
        """Pydantic config."""

        from_attributes = True

    @field_validator("deleted_at")
    @classmethod
    def normalize_deleted_at(cls, value: datetime | None) -> datetime | None:
        """Store timestamps as timezone-aware UTC."""
        return as_utc(value)

    @property
    def is_reachable(self) -> bool:
        """Whether any authority source may grant this route."""
        return self.is_active and self.deleted_at is None


class RouteTranslation(BaseModel):
    """Language-specific path and name of a route."""

    id: UUID
    route_id: UUID
    language_code: str
    translated_path: str
    translated_name: str
    is_active: bool = True

    class Config:
        """Pydantic config."""

        from_attributes = True


class RolePermission(BaseModel):
    """Route granted to every member of a role."""

    id: UUID
    role_name: str
    route_id: UUID
    is_active: bool = True

    class Config:
        """Pydantic config."""

        from_attributes = True
