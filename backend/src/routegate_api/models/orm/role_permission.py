"""Role route permission ORM model."""

import uuid

from sqlalchemy import Boolean, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from routegate_api.models.orm.base import Base, TimestampMixin, UUIDMixin


class RolePermissionORM(Base, UUIDMixin, TimestampMixin):
    """Grants members of a role access to a route.

    The role is referenced by name (not id) so grants survive the role
    row being recreated.
    """

    __tablename__ = "route_permissions"

    role_name: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    route_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("routes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_by: Mapped[uuid.UUID | None] = mapped_column(Uuid(as_uuid=True), nullable=True)
