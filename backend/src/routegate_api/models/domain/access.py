"""Access resolution domain models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from routegate_api.constants.languages import LanguageCode
from routegate_api.models.domain.override import UserRoutePermission
from routegate_api.models.domain.role import Role, RoleLanguageAccess, UserRoleAssignment
from routegate_api.models.domain.route import RolePermission, Route, RouteTranslation


class AccessSnapshot(BaseModel):
    """Point-in-time copy of every store row one resolution needs.

    A snapshot is read inside a single transaction and threaded through
    one resolution call; the engine never goes back to the stores.
    """

    user_id: UUID
    language: LanguageCode
    taken_at: datetime
    assignments: list[UserRoleAssignment] = []
    role_permissions: list[RolePermission] = []
    overrides: list[UserRoutePermission] = []
    routes: list[Route] = []
    translations: list[RouteTranslation] = []
    language_access: list[RoleLanguageAccess] = []

    class Config:
        """Pydantic config."""

        frozen = True

    def routes_by_id(self) -> dict[UUID, Route]:
        """Index routes by id."""
        return {route.id: route for route in self.routes}

    def translations_by_route(self) -> dict[UUID, list[RouteTranslation]]:
        """Active translations in the snapshot language, grouped by route id.

        Each group is ordered by translated path so the first entry is a
        deterministic display choice when duplicates exist.
        """
        result: dict[UUID, list[RouteTranslation]] = {}
        candidates = sorted(
            (
                t
                for t in self.translations
                if t.is_active and t.language_code == self.language.value
            ),
            key=lambda t: t.translated_path,
        )
        for translation in candidates:
            result.setdefault(translation.route_id, []).append(translation)
        return result


class AccessResolution(BaseModel):
    """Result of resolving a user's access in one language."""

    user_id: UUID
    language: LanguageCode
    accessible_routes: frozenset[str] = frozenset()
    allowed_languages: frozenset[str] = frozenset()
    accessible_route_ids: frozenset[UUID] = frozenset()
    roles: list[Role] = []

    class Config:
        """Pydantic config."""

        frozen = True


class MenuEntry(BaseModel):
    """Accessible route as rendered by navigation menus."""

    route_id: UUID
    pathname: str
    translated_path: str
    display_name: str
    icon: str | None = None
    menu_order: int = 0
    parent_route_id: UUID | None = None
    is_public: bool = False
    show_in_menu: bool = False


class UserPermissionSummary(BaseModel):
    """Everything a user may currently do, in one response."""

    user_id: UUID
    language: LanguageCode
    roles: list[Role] = []
    accessible_routes: list[str] = []
    allowed_languages: list[str] = []
    overrides: list[UserRoutePermission] = []


class NavigationDecision(BaseModel):
    """Outcome of guarding a localized URL path."""

    allowed: bool
    language: LanguageCode
    path: str
