"""Route access router.

The user identifier is trusted as given: an upstream gateway verifies
identity before these endpoints are called. Negative decisions and
failures produce the same response, so callers cannot tell them apart.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from routegate_api.dependencies import get_route_access_service
from routegate_api.models.domain.access import NavigationDecision, UserPermissionSummary
from routegate_api.models.dto.access import (
    AccessCheckResponse,
    AllowedLanguagesResponse,
    AllowedRoutesResponse,
    CanonicalPathResponse,
    MenuResponse,
)
from routegate_api.services.route_access_service import RouteAccessService

router = APIRouter()

AccessService = Annotated[RouteAccessService, Depends(get_route_access_service)]
LanguageParam = Annotated[str | None, Query(max_length=10)]
PathParam = Annotated[str, Query(min_length=1, max_length=500)]


@router.get("/users/{user_id}/check", response_model=AccessCheckResponse)
async def check_access(
    user_id: UUID,
    service: AccessService,
    pathname: PathParam,
    language: LanguageParam = None,
) -> AccessCheckResponse:
    """Decide whether a user may open a canonical or translated path."""
    allowed = await service.can_access(user_id, pathname, language)
    return AccessCheckResponse(allowed=allowed)


@router.get("/users/{user_id}/routes", response_model=AllowedRoutesResponse)
async def list_allowed_routes(
    user_id: UUID,
    service: AccessService,
    language: LanguageParam = None,
) -> AllowedRoutesResponse:
    """List every path identifier the user may open."""
    resolved_language = service.resolve_language(language)
    routes = await service.get_allowed_routes(user_id, resolved_language.value)
    return AllowedRoutesResponse(language=resolved_language.value, routes=sorted(routes))


@router.get("/users/{user_id}/languages", response_model=AllowedLanguagesResponse)
async def list_allowed_languages(
    user_id: UUID,
    service: AccessService,
) -> AllowedLanguagesResponse:
    """List the UI languages the user may use."""
    languages = await service.get_allowed_languages(user_id)
    return AllowedLanguagesResponse(languages=sorted(languages))


@router.get("/users/{user_id}/menu", response_model=MenuResponse)
async def get_menu(
    user_id: UUID,
    service: AccessService,
    language: LanguageParam = None,
    show_in_menu_only: bool = False,
) -> MenuResponse:
    """Get the navigation menu entries the user may open."""
    resolved_language = service.resolve_language(language)
    items = await service.get_accessible_menu(
        user_id,
        resolved_language.value,
        show_in_menu_only=show_in_menu_only,
    )
    return MenuResponse(language=resolved_language.value, items=items, total=len(items))


@router.get("/users/{user_id}/summary", response_model=UserPermissionSummary)
async def get_summary(
    user_id: UUID,
    service: AccessService,
    language: LanguageParam = None,
) -> UserPermissionSummary:
    """Summarize roles, routes, languages and overrides of a user."""
    return await service.get_user_permissions(user_id, language)


@router.get("/users/{user_id}/guard", response_model=NavigationDecision)
async def guard_navigation(
    user_id: UUID,
    service: AccessService,
    path: PathParam,
) -> NavigationDecision:
    """Guard a locale-prefixed URL path; redirect when not allowed."""
    return await service.check_navigation(user_id, path)


@router.get("/canonical", response_model=CanonicalPathResponse)
async def get_canonical_path(
    service: AccessService,
    path: PathParam,
    language: LanguageParam = None,
) -> CanonicalPathResponse:
    """Map a canonical or translated path to its canonical pathname."""
    canonical = await service.canonical_path(path, language)
    return CanonicalPathResponse(path=path, canonical_path=canonical)
