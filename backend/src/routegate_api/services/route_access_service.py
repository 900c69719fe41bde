"""Route access service: bulk and point access decisions for users."""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import datetime
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from routegate_api.config import Settings, get_settings
from routegate_api.constants.languages import LanguageCode, normalize_language, parse_language
from routegate_api.exceptions import DataAccessError, UnsupportedLanguageError
from routegate_api.models.domain.access import (
    AccessResolution,
    AccessSnapshot,
    MenuEntry,
    NavigationDecision,
    UserPermissionSummary,
)
from routegate_api.models.domain.override import UserRoutePermission
from routegate_api.models.domain.role import Role, RoleLanguageAccess, UserRoleAssignment
from routegate_api.models.domain.route import RolePermission, Route, RouteTranslation
from routegate_api.repositories.access_query import AccessQueryRepository
from routegate_api.repositories.role_language_access_repository import (
    RoleLanguageAccessRepository,
)
from routegate_api.repositories.role_permission_repository import RolePermissionRepository
from routegate_api.repositories.route_repository import RouteRepository
from routegate_api.repositories.user_role_repository import UserRoleRepository
from routegate_api.repositories.user_route_permission_repository import (
    UserRoutePermissionRepository,
)
from routegate_api.services import resolution_engine
from routegate_api.utils.clock import utcnow
from routegate_api.utils.localized_path import normalize_path, split_localized_path
from routegate_api.utils.secure_logging import log_error, log_warning

logger = logging.getLogger(__name__)


class RouteAccessService:
    """Service deciding which routes and languages a user may use.

    Every call reads the current store state; nothing is cached between
    calls. All reads of one call happen inside a single transaction, so
    with REPEATABLE READ isolation (the PostgreSQL default configured in
    settings) a call observes one consistent snapshot. Under weaker
    isolation a mutation committed between two reads of the same call can
    leak into it; that window is bounded by one call.

    Any data access failure or timeout fails closed: no routes, a false
    decision. Failures are logged, never re-raised to callers.
    """

    def __init__(
        self,
        session: AsyncSession,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """Initialize service with database session.

        Args:
            session: Database session
            settings: Application settings (defaults to the cached settings)
            clock: Source of the current time for override expiry
        """
        self.session = session
        self.settings = settings or get_settings()
        self.clock = clock
        self.user_role_repo = UserRoleRepository(session)
        self.role_permission_repo = RolePermissionRepository(session)
        self.language_access_repo = RoleLanguageAccessRepository(session)
        self.override_repo = UserRoutePermissionRepository(session)
        self.route_repo = RouteRepository(session)
        self.access_query = AccessQueryRepository(session)

    # =========================================================================
    # Helpers
    # =========================================================================

    def resolve_language(self, language_code: str | None) -> LanguageCode:
        """Parse a language code, falling back to the default language.

        Args:
            language_code: Raw language code

        Returns:
            Supported LanguageCode
        """
        try:
            return parse_language(language_code)
        except UnsupportedLanguageError as e:
            if language_code is not None:
                log_warning(logger, f"Unsupported language {language_code!r}, using default", e)
            return normalize_language(None, default=self.settings.default_language)

    @asynccontextmanager
    async def _read_scope(self) -> AsyncIterator[None]:
        """Bound one call's reads by a timeout and a single transaction."""
        async with asyncio.timeout(self.settings.resolution_timeout_seconds):
            if self.session.in_transaction():
                yield
            else:
                async with self.session.begin():
                    yield

    def _fail_closed(self, operation: str, user_id: UUID, error: Exception) -> None:
        log_error(
            logger,
            f"Access {operation} failed for user {user_id}, denying",
            error,
        )

    # =========================================================================
    # Snapshot
    # =========================================================================

    async def load_snapshot(self, user_id: UUID, language: LanguageCode) -> AccessSnapshot:
        """Read every store row needed to resolve a user's access.

        Role permissions and language grants depend on the effective role
        names, so they are read after the assignments.

        Args:
            user_id: User UUID
            language: Requested language

        Returns:
            AccessSnapshot

        Raises:
            DataAccessError: If any read fails or returns malformed rows
        """
        now = self.clock()
        assignments = await self.user_role_repo.get_effective_for_user(user_id)
        role_names = {a.role.name for a in assignments if a.role is not None}
        role_permissions = await self.role_permission_repo.get_active_for_roles(role_names)
        language_access = await self.language_access_repo.get_active_for_roles(role_names)
        overrides = await self.override_repo.get_effective_for_user(user_id, now)

        routes = await self.route_repo.get_public_routes()
        referenced = {p.route_id for p in role_permissions} | {o.route_id for o in overrides}
        referenced -= {route.id for route in routes}
        routes += await self.route_repo.get_by_ids(referenced)
        translations = await self.route_repo.get_translations(
            {route.id for route in routes},
            language.value,
        )

        try:
            return AccessSnapshot(
                user_id=user_id,
                language=language,
                taken_at=now,
                assignments=[UserRoleAssignment.model_validate(a) for a in assignments],
                role_permissions=[RolePermission.model_validate(p) for p in role_permissions],
                overrides=[UserRoutePermission.model_validate(o) for o in overrides],
                routes=[Route.model_validate(r) for r in routes],
                translations=[RouteTranslation.model_validate(t) for t in translations],
                language_access=[RoleLanguageAccess.model_validate(a) for a in language_access],
            )
        except PydanticValidationError as e:
            raise DataAccessError("load_snapshot", e) from e

    async def _resolve(
        self,
        user_id: UUID,
        language: LanguageCode,
    ) -> tuple[AccessSnapshot, AccessResolution]:
        async with self._read_scope():
            snapshot = await self.load_snapshot(user_id, language)
        resolution = resolution_engine.resolve(snapshot, self.settings.default_language)
        logger.debug(
            f"Resolved {len(resolution.accessible_routes)} routes and "
            f"{len(resolution.allowed_languages)} languages for user {user_id} ({language})"
        )
        return snapshot, resolution

    def _denied_resolution(self, user_id: UUID, language: LanguageCode) -> AccessResolution:
        return AccessResolution(
            user_id=user_id,
            language=language,
            allowed_languages=frozenset({self.settings.default_language}),
        )

    # =========================================================================
    # Bulk reads
    # =========================================================================

    async def resolve(self, user_id: UUID, language_code: str | None = None) -> AccessResolution:
        """Resolve accessible routes and allowed languages.

        Args:
            user_id: User UUID
            language_code: Requested language (invalid values use the default)

        Returns:
            AccessResolution; on failure, no routes and the default language
        """
        language = self.resolve_language(language_code)
        try:
            _, resolution = await self._resolve(user_id, language)
        except Exception as e:
            self._fail_closed("resolution", user_id, e)
            return self._denied_resolution(user_id, language)
        return resolution

    async def get_allowed_routes(self, user_id: UUID, language_code: str | None = None) -> set[str]:
        """Get every path identifier the user may access.

        Args:
            user_id: User UUID
            language_code: Requested language

        Returns:
            Canonical pathnames plus translated paths in the language
        """
        resolution = await self.resolve(user_id, language_code)
        return set(resolution.accessible_routes)

    async def get_allowed_languages(self, user_id: UUID) -> set[str]:
        """Get the UI languages the user may use.

        Users without an effective role get the default language.

        Args:
            user_id: User UUID

        Returns:
            Allowed language codes
        """
        resolution = await self.resolve(user_id, self.settings.default_language)
        return set(resolution.allowed_languages)

    async def can_use_language(self, user_id: UUID, language_code: str) -> bool:
        """Check whether the user may switch the UI to a language."""
        try:
            language = parse_language(language_code)
        except UnsupportedLanguageError:
            return False
        return language.value in await self.get_allowed_languages(user_id)

    async def get_accessible_menu(
        self,
        user_id: UUID,
        language_code: str | None = None,
        show_in_menu_only: bool = False,
    ) -> list[MenuEntry]:
        """Get accessible routes as navigation menu entries.

        Args:
            user_id: User UUID
            language_code: Requested language
            show_in_menu_only: Only include routes flagged for the menu

        Returns:
            Menu entries ordered by menu order, then pathname
        """
        language = self.resolve_language(language_code)
        try:
            snapshot, resolution = await self._resolve(user_id, language)
        except Exception as e:
            self._fail_closed("menu", user_id, e)
            return []

        routes = snapshot.routes_by_id()
        translations = snapshot.translations_by_route()
        entries = []
        for route_id in resolution.accessible_route_ids:
            route = routes[route_id]
            if show_in_menu_only and not route.show_in_menu:
                continue
            route_translations = translations.get(route_id, [])
            # Only link paths left after deny subtraction
            reachable = next(
                (t for t in route_translations if t.translated_path in resolution.accessible_routes),
                None,
            )
            named = reachable or next(iter(route_translations), None)
            entries.append(
                MenuEntry(
                    route_id=route.id,
                    pathname=route.pathname,
                    translated_path=reachable.translated_path if reachable else route.pathname,
                    display_name=named.translated_name if named else route.display_name,
                    icon=route.icon,
                    menu_order=route.menu_order,
                    parent_route_id=route.parent_route_id,
                    is_public=route.is_public,
                    show_in_menu=route.show_in_menu,
                )
            )
        return sorted(entries, key=lambda entry: (entry.menu_order, entry.pathname))

    async def get_highest_role(self, user_id: UUID) -> Role | None:
        """Get the effective role with the highest hierarchy level.

        Informational only: hierarchy levels grant nothing.

        Args:
            user_id: User UUID

        Returns:
            Role or None if the user has no effective role
        """
        resolution = await self.resolve(user_id)
        if not resolution.roles:
            return None
        return sorted(resolution.roles, key=lambda role: (-role.hierarchy_level, role.name))[0]

    async def get_user_permissions(
        self,
        user_id: UUID,
        language_code: str | None = None,
    ) -> UserPermissionSummary:
        """Summarize roles, routes, languages and overrides of a user.

        Args:
            user_id: User UUID
            language_code: Requested language

        Returns:
            UserPermissionSummary; on failure, empty apart from the default language
        """
        language = self.resolve_language(language_code)
        try:
            snapshot, resolution = await self._resolve(user_id, language)
        except Exception as e:
            self._fail_closed("summary", user_id, e)
            return UserPermissionSummary(
                user_id=user_id,
                language=language,
                allowed_languages=[self.settings.default_language],
            )

        return UserPermissionSummary(
            user_id=user_id,
            language=language,
            roles=resolution.roles,
            accessible_routes=sorted(resolution.accessible_routes),
            allowed_languages=sorted(resolution.allowed_languages),
            overrides=[o for o in snapshot.overrides if o.is_effective(snapshot.taken_at)],
        )

    # =========================================================================
    # Point decisions
    # =========================================================================

    async def can_access(
        self,
        user_id: UUID,
        pathname: str,
        language_code: str | None = None,
    ) -> bool:
        """Decide whether the user may open a path.

        Equivalent to ``pathname in get_allowed_routes(user_id, language)``,
        answered by one atomic query.

        Args:
            user_id: User UUID
            pathname: Canonical pathname or translated path
            language_code: Language of the translated path

        Returns:
            True if access is allowed; False when denied or on any failure
        """
        language = self.resolve_language(language_code)
        try:
            async with self._read_scope():
                allowed = await self.access_query.can_access_route(
                    user_id,
                    pathname,
                    language.value,
                    self.clock(),
                )
        except Exception as e:
            self._fail_closed("check", user_id, e)
            return False
        logger.debug(f"Access to {pathname!r} ({language}) for user {user_id}: {allowed}")
        return allowed

    async def check_navigation(self, user_id: UUID, url_path: str) -> NavigationDecision:
        """Guard a locale-prefixed URL path such as ``/en/library``.

        A path without a supported locale prefix is checked in the default
        language.

        Args:
            user_id: User UUID
            url_path: Requested URL path

        Returns:
            NavigationDecision; consumers redirect when not allowed
        """
        locale, path = split_localized_path(url_path)
        language = self.resolve_language(locale or self.settings.default_language)
        allowed = await self.can_access(user_id, path, language.value)
        return NavigationDecision(allowed=allowed, language=language, path=path)

    async def canonical_path(self, path: str, language_code: str | None = None) -> str | None:
        """Map a canonical or translated path to its canonical pathname.

        Args:
            path: Canonical pathname or translated path
            language_code: Language of the translated path

        Returns:
            Canonical pathname, or None if unknown or on failure
        """
        language = self.resolve_language(language_code)
        path = normalize_path(path)
        try:
            async with self._read_scope():
                route_ids = await self.route_repo.find_route_ids_by_path(path, language.value)
                routes = await self.route_repo.get_by_ids(route_ids)
                translations = await self.route_repo.get_translations(route_ids, language.value)
            return resolution_engine.canonicalize(
                path,
                [Route.model_validate(r) for r in routes],
                [RouteTranslation.model_validate(t) for t in translations],
                language.value,
            )
        except Exception as e:
            log_error(logger, f"Canonicalizing {path!r} failed", e)
            return None
