"""Route and route translation ORM models."""

import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from routegate_api.models.orm.base import Base, TimestampMixin, UUIDMixin


class RouteORM(Base, UUIDMixin, TimestampMixin):
    """Route database model."""

    __tablename__ = "routes"

    pathname: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    icon: Mapped[str | None] = mapped_column(String(100), nullable=True)
    show_in_menu: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    menu_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    parent_route_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("routes.id", ondelete="SET NULL"),
        nullable=True,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_public: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    requires_verification: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_by: Mapped[uuid.UUID | None] = mapped_column(Uuid(as_uuid=True), nullable=True)

    # Relationships
    translations: Mapped[list["RouteTranslationORM"]] = relationship(
        "RouteTranslationORM",
        back_populates="route",
        cascade="all, delete-orphan",
    )


class RouteTranslationORM(Base, UUIDMixin, TimestampMixin):
    """Language-specific path and name of a route."""

    __tablename__ = "route_translations"

    route_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("routes.id", ondelete="CASCADE"),
        nullable=False,
    )
    language_code: Mapped[str] = mapped_column(String(5), nullable=False)
    translated_path: Mapped[str] = mapped_column(String(255), nullable=False)
    translated_name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_by: Mapped[uuid.UUID | None] = mapped_column(Uuid(as_uuid=True), nullable=True)

    __table_args__ = (
        Index("ix_route_translations_route_language", "route_id", "language_code"),
        Index("ix_route_translations_language_path", "language_code", "translated_path"),
    )

    # Relationships
    route: Mapped[RouteORM] = relationship("RouteORM", back_populates="translations")
