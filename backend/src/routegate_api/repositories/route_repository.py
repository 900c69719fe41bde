"""Route and route translation repository."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import select

from routegate_api.exceptions import RouteNotFoundError
from routegate_api.models.orm.route import RouteORM, RouteTranslationORM
from routegate_api.repositories.base import BaseRepository


class RouteRepository(BaseRepository[RouteORM]):
    """Repository for routes and their translations."""

    model = RouteORM

    async def get_by_pathname(self, pathname: str) -> RouteORM | None:
        """Get route by canonical pathname.

        Args:
            pathname: Canonical pathname

        Returns:
            RouteORM or None if not found
        """
        result = await self._execute(
            select(RouteORM).where(RouteORM.pathname == pathname),
            "routes.get_by_pathname",
        )
        return result.scalar_one_or_none()

    async def get_public_routes(self) -> list[RouteORM]:
        """Get public routes that are active and not soft-deleted.

        Returns:
            List of RouteORM
        """
        result = await self._execute(
            select(RouteORM)
            .where(RouteORM.is_public.is_(True))
            .where(RouteORM.is_active.is_(True))
            .where(RouteORM.deleted_at.is_(None))
            .order_by(RouteORM.menu_order, RouteORM.pathname),
            "routes.get_public_routes",
        )
        return list(result.scalars().all())

    async def get_by_ids(self, route_ids: set[UUID]) -> list[RouteORM]:
        """Get routes by id regardless of their state.

        Args:
            route_ids: Route UUIDs

        Returns:
            List of RouteORM (missing ids are skipped)
        """
        if not route_ids:
            return []
        result = await self._execute(
            select(RouteORM).where(RouteORM.id.in_(route_ids)),
            "routes.get_by_ids",
        )
        return list(result.scalars().all())

    async def get_translations(
        self,
        route_ids: set[UUID],
        language_code: str,
    ) -> list[RouteTranslationORM]:
        """Get active translations of routes in one language.

        Args:
            route_ids: Route UUIDs
            language_code: Language code

        Returns:
            List of RouteTranslationORM
        """
        if not route_ids:
            return []
        result = await self._execute(
            select(RouteTranslationORM)
            .where(RouteTranslationORM.route_id.in_(route_ids))
            .where(RouteTranslationORM.language_code == language_code)
            .where(RouteTranslationORM.is_active.is_(True))
            .order_by(RouteTranslationORM.translated_path),
            "route_translations.get_translations",
        )
        return list(result.scalars().all())

    async def find_route_ids_by_path(self, path: str, language_code: str) -> set[UUID]:
        """Find routes identified by a canonical or translated path.

        Args:
            path: Canonical pathname or translated path
            language_code: Language of the translated path

        Returns:
            Matching route UUIDs
        """
        canonical = await self._execute(
            select(RouteORM.id).where(RouteORM.pathname == path),
            "routes.find_by_pathname",
        )
        translated = await self._execute(
            select(RouteTranslationORM.route_id)
            .where(RouteTranslationORM.translated_path == path)
            .where(RouteTranslationORM.language_code == language_code)
            .where(RouteTranslationORM.is_active.is_(True)),
            "route_translations.find_by_path",
        )
        return set(canonical.scalars().all()) | set(translated.scalars().all())

    async def create_route(self, pathname: str, display_name: str, **fields) -> RouteORM:
        """Create a new route.

        Args:
            pathname: Canonical pathname
            display_name: Human-readable name
            **fields: Optional route columns (is_public, show_in_menu, ...)

        Returns:
            Created RouteORM
        """
        return await self.create(pathname=pathname, display_name=display_name, **fields)

    async def add_translation(
        self,
        route_id: UUID,
        language_code: str,
        translated_path: str,
        translated_name: str,
        is_active: bool = True,
    ) -> RouteTranslationORM:
        """Add a translation to a route.

        Args:
            route_id: Route UUID
            language_code: Language code
            translated_path: Localized path
            translated_name: Localized name
            is_active: Whether the translation is active

        Returns:
            Created RouteTranslationORM
        """
        translation = RouteTranslationORM(
            route_id=route_id,
            language_code=language_code,
            translated_path=translated_path,
            translated_name=translated_name,
            is_active=is_active,
        )
        self.session.add(translation)
        await self._flush("route_translations.create")
        return translation

    async def soft_delete(self, route_id: UUID, deleted_at: datetime) -> RouteORM:
        """Soft-delete a route.

        Args:
            route_id: Route UUID
            deleted_at: Deletion timestamp

        Returns:
            Updated RouteORM

        Raises:
            RouteNotFoundError: If the route does not exist
        """
        route = await self.get(route_id)
        if route is None:
            raise RouteNotFoundError(route_id=str(route_id))
        route.deleted_at = deleted_at
        await self._flush("routes.soft_delete")
        return route
