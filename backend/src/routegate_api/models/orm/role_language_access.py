"""Role language access ORM model."""

import uuid

from sqlalchemy import Boolean, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from routegate_api.models.orm.base import Base, TimestampMixin, UUIDMixin


class RoleLanguageAccessORM(Base, UUIDMixin, TimestampMixin):
    """UI language that members of a role may use."""

    __tablename__ = "role_language_access"

    role_name: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    language_code: Mapped[str] = mapped_column(String(5), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_by: Mapped[uuid.UUID | None] = mapped_column(Uuid(as_uuid=True), nullable=True)
