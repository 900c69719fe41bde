"""Route access schema: roles, routes, grants, overrides and language access.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union
from uuid import uuid4

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), onupdate=sa.func.now(), nullable=False),
    ]


# Point check usable from SQL. Mirrors the service query: a path is
# accessible when it identifies an allowed route and no denied route.
CAN_ACCESS_ROUTE_FUNCTION = """
CREATE OR REPLACE FUNCTION can_access_route(
    p_user_id uuid,
    p_pathname text,
    p_language_code text DEFAULT 'es'
) RETURNS boolean
LANGUAGE plpgsql
STABLE
AS $$
DECLARE
    v_lang text;
    v_allowed boolean;
    v_denied boolean;
BEGIN
    v_lang := lower(btrim(coalesce(p_language_code, 'es')));
    IF v_lang NOT IN ('es', 'en', 'fr', 'it') THEN
        v_lang := 'es';
    END IF;

    SELECT EXISTS (
        SELECT 1
        FROM routes r
        WHERE r.is_active
          AND r.deleted_at IS NULL
          AND (
              r.pathname = p_pathname
              OR EXISTS (
                  SELECT 1 FROM route_translations t
                  WHERE t.route_id = r.id
                    AND t.language_code = v_lang
                    AND t.is_active
                    AND t.translated_path = p_pathname
              )
          )
          AND (
              r.is_public
              OR EXISTS (
                  SELECT 1
                  FROM route_permissions rp
                  JOIN roles ro ON ro.name = rp.role_name AND ro.is_active
                  JOIN user_roles ur ON ur.role_id = ro.id
                  WHERE rp.route_id = r.id
                    AND rp.is_active
                    AND ur.user_id = p_user_id
                    AND ur.is_active
                    AND ur.revoked_at IS NULL
              )
              OR EXISTS (
                  SELECT 1 FROM user_route_permissions g
                  WHERE g.route_id = r.id
                    AND g.user_id = p_user_id
                    AND g.permission_type = 'grant'
                    AND g.is_active
                    AND (g.expires_at IS NULL OR g.expires_at > now())
              )
          )
    ) INTO v_allowed;

    IF NOT v_allowed THEN
        RETURN false;
    END IF;

    SELECT EXISTS (
        SELECT 1
        FROM user_route_permissions d
        JOIN routes r ON r.id = d.route_id
        WHERE d.user_id = p_user_id
          AND d.permission_type = 'deny'
          AND d.is_active
          AND (d.expires_at IS NULL OR d.expires_at > now())
          AND (
              r.pathname = p_pathname
              OR EXISTS (
                  SELECT 1 FROM route_translations t
                  WHERE t.route_id = r.id
                    AND t.language_code = v_lang
                    AND t.is_active
                    AND t.translated_path = p_pathname
              )
          )
    ) INTO v_denied;

    RETURN NOT v_denied;
EXCEPTION
    WHEN OTHERS THEN
        RETURN false;
END;
$$;
"""


def upgrade() -> None:
    # Roles
    op.create_table(
        "roles",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, default=uuid4),
        sa.Column("name", sa.String(50), unique=True, nullable=False, index=True),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("hierarchy_level", sa.Integer, nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("is_system_role", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("created_by", postgresql.UUID(as_uuid=True), nullable=True),
        *_timestamps(),
    )

    # Routes and translations
    op.create_table(
        "routes",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, default=uuid4),
        sa.Column("pathname", sa.String(255), unique=True, nullable=False, index=True),
        sa.Column("display_name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("icon", sa.String(100), nullable=True),
        sa.Column("show_in_menu", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("menu_order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("parent_route_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("routes.id", ondelete="SET NULL"), nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("is_public", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("requires_verification", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_by", postgresql.UUID(as_uuid=True), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "route_translations",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, default=uuid4),
        sa.Column("route_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("routes.id", ondelete="CASCADE"), nullable=False),
        sa.Column("language_code", sa.String(5), nullable=False),
        sa.Column("translated_path", sa.String(255), nullable=False),
        sa.Column("translated_name", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("created_by", postgresql.UUID(as_uuid=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_route_translations_route_language", "route_translations", ["route_id", "language_code"])
    op.create_index("ix_route_translations_language_path", "route_translations", ["language_code", "translated_path"])

    # Role assignments (revocation keeps the row)
    op.create_table(
        "user_roles",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, default=uuid4),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False, index=True),
        sa.Column("role_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("roles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("revoked_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("assigned_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("revoked_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        *_timestamps(),
    )

    # Role route grants, keyed by role name
    op.create_table(
        "route_permissions",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, default=uuid4),
        sa.Column("role_name", sa.String(50), nullable=False, index=True),
        sa.Column("route_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("routes.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("created_by", postgresql.UUID(as_uuid=True), nullable=True),
        *_timestamps(),
    )

    # Per-user grant/deny overrides
    op.create_table(
        "user_route_permissions",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, default=uuid4),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("route_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("routes.id", ondelete="CASCADE"), nullable=False),
        sa.Column("permission_type", sa.String(10), nullable=False),
        sa.Column("reason", sa.Text, nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("granted_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("permission_type IN ('grant', 'deny')", name="ck_user_route_permissions_type"),
    )
    op.create_index("ix_user_route_permissions_user_route", "user_route_permissions", ["user_id", "route_id"])

    # UI languages per role
    op.create_table(
        "role_language_access",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, default=uuid4),
        sa.Column("role_name", sa.String(50), nullable=False, index=True),
        sa.Column("language_code", sa.String(5), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("created_by", postgresql.UUID(as_uuid=True), nullable=True),
        *_timestamps(),
    )

    op.execute(CAN_ACCESS_ROUTE_FUNCTION)


def downgrade() -> None:
    op.execute("DROP FUNCTION IF EXISTS can_access_route(uuid, text, text)")
    op.drop_table("role_language_access")
    op.drop_index("ix_user_route_permissions_user_route", table_name="user_route_permissions")
    op.drop_table("user_route_permissions")
    op.drop_table("route_permissions")
    op.drop_table("user_roles")
    op.drop_index("ix_route_translations_language_path", table_name="route_translations")
    op.drop_index("ix_route_translations_route_language", table_name="route_translations")
    op.drop_table("route_translations")
    op.drop_table("routes")
    op.drop_table("roles")
