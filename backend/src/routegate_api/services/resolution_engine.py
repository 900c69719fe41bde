"""Route access resolution over an access snapshot.

Three independent authority sources decide which routes a user may reach:

1. Public routes (``is_public``) are visible to everyone.
2. Roles grant routes through active role permissions. Only effective
   assignments count (active, not revoked, role active). Roles do not
   inherit grants from lower hierarchy levels.
3. Individual overrides grant or deny single routes for one user until
   they expire.

Routes are identified by their canonical pathname plus every active
translated path in the requested language. The final identifier set is
``(public | role_granted | user_granted) - user_denied``; the subtraction
runs after all unions, so a deny always wins. Soft-deleted or inactive
routes contribute nothing to the grant sources.

Every function here is pure: it only reads the snapshot it is given.
"""

import logging
from uuid import UUID

from routegate_api.constants.languages import DEFAULT_LANGUAGE
from routegate_api.models.domain.access import AccessResolution, AccessSnapshot
from routegate_api.models.domain.override import PermissionType
from routegate_api.models.domain.role import Role
from routegate_api.models.domain.route import Route, RouteTranslation

logger = logging.getLogger(__name__)


def effective_roles(snapshot: AccessSnapshot) -> list[Role]:
    """Get the roles the user currently holds.

    Args:
        snapshot: Access snapshot

    Returns:
        Effective roles, unique by name, ordered by name
    """
    roles: dict[str, Role] = {}
    for assignment in snapshot.assignments:
        if assignment.role is None:
            logger.debug(f"Ignoring assignment {assignment.id} with missing role {assignment.role_id}")
            continue
        if assignment.is_effective():
            roles.setdefault(assignment.role.name, assignment.role)
    return [roles[name] for name in sorted(roles)]


def route_identifiers(route: Route, translations: list[RouteTranslation]) -> set[str]:
    """Get every path that identifies a route in one language."""
    identifiers = {route.pathname}
    identifiers.update(t.translated_path for t in translations)
    return identifiers


def _public_route_ids(routes: dict[UUID, Route]) -> set[UUID]:
    return {route.id for route in routes.values() if route.is_public and route.is_reachable}


def _role_granted_route_ids(
    snapshot: AccessSnapshot,
    role_names: set[str],
    routes: dict[UUID, Route],
) -> set[UUID]:
    granted: set[UUID] = set()
    for permission in snapshot.role_permissions:
        if not permission.is_active or permission.role_name not in role_names:
            continue
        route = routes.get(permission.route_id)
        if route is None:
            logger.debug(f"Ignoring role permission {permission.id} for missing route {permission.route_id}")
            continue
        if route.is_reachable:
            granted.add(route.id)
    return granted


def _override_route_ids(
    snapshot: AccessSnapshot,
    permission_type: PermissionType,
    routes: dict[UUID, Route],
) -> set[UUID]:
    result: set[UUID] = set()
    for override in snapshot.overrides:
        if override.user_id != snapshot.user_id:
            continue
        if override.permission_type != permission_type:
            continue
        if not override.is_effective(snapshot.taken_at):
            continue
        route = routes.get(override.route_id)
        if route is None:
            logger.debug(f"Ignoring {permission_type} override {override.id} for missing route {override.route_id}")
            continue
        # A deny on an inactive route is a harmless no-op, so only grants filter
        if permission_type == PermissionType.GRANT and not route.is_reachable:
            continue
        result.add(route.id)
    return result


def allowed_languages(
    snapshot: AccessSnapshot,
    roles: list[Role],
    default_language: str = DEFAULT_LANGUAGE.value,
) -> frozenset[str]:
    """Get the UI languages the given roles unlock.

    Args:
        snapshot: Access snapshot
        roles: Effective roles of the user
        default_language: Language granted to users without any role

    Returns:
        Allowed language codes
    """
    if not roles:
        return frozenset({default_language})
    role_names = {role.name for role in roles}
    return frozenset(
        access.language_code
        for access in snapshot.language_access
        if access.is_active and access.role_name in role_names
    )


def resolve(
    snapshot: AccessSnapshot,
    default_language: str = DEFAULT_LANGUAGE.value,
) -> AccessResolution:
    """Resolve the accessible routes and allowed languages of a user.

    Args:
        snapshot: Access snapshot read for the user and language
        default_language: Language granted to users without any role

    Returns:
        AccessResolution with the final identifier set
    """
    routes = snapshot.routes_by_id()
    translations = snapshot.translations_by_route()

    roles = effective_roles(snapshot)
    role_names = {role.name for role in roles}

    public_ids = _public_route_ids(routes)
    role_ids = _role_granted_route_ids(snapshot, role_names, routes)
    granted_ids = _override_route_ids(snapshot, PermissionType.GRANT, routes)
    denied_ids = _override_route_ids(snapshot, PermissionType.DENY, routes)

    allowed_route_ids = public_ids | role_ids | granted_ids

    allowed_identifiers: set[str] = set()
    identifiers_by_route: dict[UUID, set[str]] = {}
    for route_id in allowed_route_ids:
        identifiers = route_identifiers(routes[route_id], translations.get(route_id, []))
        identifiers_by_route[route_id] = identifiers
        allowed_identifiers |= identifiers

    denied_identifiers: set[str] = set()
    for route_id in denied_ids:
        denied_identifiers |= route_identifiers(routes[route_id], translations.get(route_id, []))

    # Deny subtraction strictly after every union
    accessible = allowed_identifiers - denied_identifiers
    accessible_route_ids = {
        route_id
        for route_id, identifiers in identifiers_by_route.items()
        if identifiers & accessible
    }

    return AccessResolution(
        user_id=snapshot.user_id,
        language=snapshot.language,
        accessible_routes=frozenset(accessible),
        allowed_languages=allowed_languages(snapshot, roles, default_language),
        accessible_route_ids=frozenset(accessible_route_ids),
        roles=roles,
    )


def canonicalize(
    path: str,
    routes: list[Route],
    translations: list[RouteTranslation],
    language_code: str,
) -> str | None:
    """Map a canonical or translated path to the canonical pathname.

    A canonical pathname wins over a translated path of another route.
    Among several translated matches the lowest pathname is returned.

    Args:
        path: Canonical pathname or translated path
        routes: Candidate routes
        translations: Translations of the candidate routes
        language_code: Language of the translated path

    Returns:
        Canonical pathname, or None if no route matches
    """
    by_id = {route.id: route for route in routes}
    for route in by_id.values():
        if route.pathname == path:
            return route.pathname
    matches = sorted(
        by_id[t.route_id].pathname
        for t in translations
        if t.is_active
        and t.language_code == language_code
        and t.translated_path == path
        and t.route_id in by_id
    )
    return matches[0] if matches else None
