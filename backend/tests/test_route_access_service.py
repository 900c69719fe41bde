"""Tests for RouteAccessService against an in-memory database."""

import asyncio
import logging
from datetime import timedelta
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from routegate_api.exceptions import DataAccessError
from routegate_api.models.domain.override import PermissionType
from routegate_api.services.route_access_service import RouteAccessService


@pytest.fixture
async def library_setup(seeder, user_id):
    """Student U with /library (es: /biblioteca) granted through the role."""
    student = await seeder.role("student", hierarchy_level=1, languages=("es", "en"))
    library = await seeder.route("/library", translations={"es": "/biblioteca", "en": "/library-en"})
    await seeder.grant_to_role(student, library)
    assignment = await seeder.assign(user_id, student)
    return {"role": student, "route": library, "assignment": assignment}


class TestConcreteScenarios:
    """End-to-end scenarios for the resolution rules."""

    async def test_student_library_scenario(self, service, library_setup, user_id) -> None:
        routes = await service.get_allowed_routes(user_id, "es")

        assert "/biblioteca" in routes
        assert "/library" in routes
        assert await service.can_access(user_id, "/biblioteca", "es") is True
        assert await service.can_access(user_id, "/library", "es") is True

    async def test_deny_overrides_role_grant(self, service, seeder, library_setup, user_id) -> None:
        await seeder.override(user_id, library_setup["route"], PermissionType.DENY)

        assert await service.can_access(user_id, "/biblioteca", "es") is False
        assert "/biblioteca" not in await service.get_allowed_routes(user_id, "es")

    async def test_user_without_roles_sees_public_routes(self, service, seeder) -> None:
        visitor = uuid4()
        await seeder.route("/about", translations={"en": "/about-us"}, is_public=True)
        await seeder.route("/private")

        routes = await service.get_allowed_routes(visitor, "en")

        assert routes == {"/about", "/about-us"}
        assert await service.get_allowed_languages(visitor) == {"es"}


class TestAccessRules:
    """Invariants of the combined authority sources."""

    async def test_default_deny(self, service, seeder, user_id) -> None:
        await seeder.route("/home", translations={"es": "/inicio"}, is_public=True)
        await seeder.route("/admin", translations={"es": "/administracion"})

        assert await service.get_allowed_routes(user_id, "es") == {"/home", "/inicio"}
        assert await service.can_access(user_id, "/admin", "es") is False

    async def test_deny_supremacy_over_public_and_role(self, service, seeder, user_id) -> None:
        student = await seeder.role("student")
        news = await seeder.route("/news", translations={"es": "/noticias"}, is_public=True)
        await seeder.grant_to_role(student, news)
        await seeder.assign(user_id, student)
        await seeder.override(user_id, news, PermissionType.GRANT)
        await seeder.override(user_id, news, PermissionType.DENY)

        routes = await service.get_allowed_routes(user_id, "es")

        assert "/news" not in routes
        assert "/noticias" not in routes
        assert await service.can_access(user_id, "/news", "es") is False

    async def test_expired_deny_falls_back_to_grants(self, service, seeder, clock, library_setup, user_id) -> None:
        await seeder.override(
            user_id,
            library_setup["route"],
            PermissionType.DENY,
            expires_at=clock.now - timedelta(minutes=1),
        )

        assert await service.can_access(user_id, "/biblioteca", "es") is True
        assert "/biblioteca" in await service.get_allowed_routes(user_id, "es")

    async def test_grant_stops_at_expiry(self, service, seeder, clock, user_id) -> None:
        reports = await seeder.route("/reports")
        await seeder.override(
            user_id,
            reports,
            PermissionType.GRANT,
            expires_at=clock.now + timedelta(hours=1),
        )

        assert await service.can_access(user_id, "/reports", "es") is True

        clock.advance(timedelta(hours=2))

        assert await service.can_access(user_id, "/reports", "es") is False
        assert await service.get_allowed_routes(user_id, "es") == set()

    async def test_revocation_keeps_public_and_overrides(self, service, seeder, clock, library_setup, user_id) -> None:
        await seeder.route("/home", is_public=True)
        reports = await seeder.route("/reports")
        await seeder.override(user_id, reports, PermissionType.GRANT)

        before = await service.get_allowed_routes(user_id, "es")
        assert {"/library", "/biblioteca", "/home", "/reports"} <= before

        await seeder.assignments.revoke(library_setup["assignment"].id, revoked_at=clock.now)

        after = await service.get_allowed_routes(user_id, "es")
        assert after == {"/home", "/reports"}
        assert await service.can_access(user_id, "/biblioteca", "es") is False

    async def test_role_deactivation_removes_grants(self, service, seeder, library_setup, user_id) -> None:
        await seeder.roles.deactivate(library_setup["role"].id)

        assert await service.get_allowed_routes(user_id, "es") == set()
        assert await service.get_highest_role(user_id) is None

    async def test_soft_delete_is_absolute(self, service, seeder, clock, user_id) -> None:
        student = await seeder.role("student")
        archive = await seeder.route("/archive", translations={"es": "/archivo"}, is_public=True)
        await seeder.grant_to_role(student, archive)
        await seeder.assign(user_id, student)
        await seeder.override(user_id, archive, PermissionType.GRANT)

        await seeder.routes.soft_delete(archive.id, deleted_at=clock.now)

        assert await service.get_allowed_routes(user_id, "es") == set()
        assert await service.can_access(user_id, "/archive", "es") is False
        assert await service.can_access(user_id, "/archivo", "es") is False

    async def test_inactive_translation_is_not_accessible(self, service, seeder, user_id) -> None:
        faq = await seeder.route("/faq", is_public=True)
        await seeder.routes.add_translation(faq.id, "es", "/preguntas", "Preguntas", is_active=False)

        assert await service.get_allowed_routes(user_id, "es") == {"/faq"}
        assert await service.can_access(user_id, "/preguntas", "es") is False

    async def test_determinism(self, service, library_setup, user_id) -> None:
        first = await service.resolve(user_id, "es")
        second = await service.resolve(user_id, "es")

        assert first == second

    async def test_roles_do_not_leak_between_users(self, service, library_setup) -> None:
        other = uuid4()

        assert await service.get_allowed_routes(other, "es") == set()


class TestPointCheckMatchesBulkSet:
    """can_access answers exactly membership in get_allowed_routes."""

    async def test_every_candidate_path_agrees(self, service, seeder, clock, user_id) -> None:
        student = await seeder.role("student")
        staff = await seeder.role("staff", is_system_role=True)
        await seeder.route("/home", translations={"es": "/inicio", "en": "/start"}, is_public=True)
        library = await seeder.route("/library", translations={"es": "/biblioteca"})
        books = await seeder.route("/books", translations={"es": "/biblioteca"}, is_public=True)
        admin = await seeder.route("/admin", translations={"es": "/administracion"})
        old = await seeder.route("/old", is_public=True, is_active=False)
        reports = await seeder.route("/reports", translations={"es": "/informes"})
        await seeder.grant_to_role(student, library)
        await seeder.grant_to_role(staff, admin)
        await seeder.assign(user_id, student)
        await seeder.override(user_id, books, PermissionType.DENY)
        await seeder.override(user_id, reports, PermissionType.GRANT, expires_at=clock.now + timedelta(days=1))
        await seeder.override(user_id, old, PermissionType.GRANT)

        candidates = [
            "/home", "/inicio", "/start", "/library", "/biblioteca", "/books",
            "/admin", "/administracion", "/old", "/reports", "/informes", "/missing",
        ]
        for language in ("es", "en"):
            allowed = await service.get_allowed_routes(user_id, language)
            for path in candidates:
                assert await service.can_access(user_id, path, language) == (path in allowed), (path, language)

        es_routes = await service.get_allowed_routes(user_id, "es")
        assert "/biblioteca" not in es_routes
        assert "/library" in es_routes
        assert "/informes" in es_routes
        assert "/old" not in es_routes


class TestLanguages:
    """Allowed UI languages."""

    async def test_role_languages(self, service, library_setup, user_id) -> None:
        assert await service.get_allowed_languages(user_id) == {"es", "en"}
        assert await service.can_use_language(user_id, "EN") is True
        assert await service.can_use_language(user_id, "fr") is False
        assert await service.can_use_language(user_id, "xx") is False

    async def test_roles_without_languages(self, service, seeder, user_id) -> None:
        guest = await seeder.role("guest")
        await seeder.assign(user_id, guest)

        assert await service.get_allowed_languages(user_id) == set()

    async def test_deactivated_language_grant(self, service, seeder, library_setup, user_id) -> None:
        grants = await seeder.languages.get_active_for_roles({"student"})
        english = next(g for g in grants if g.language_code == "en")
        await seeder.languages.deactivate(english.id)

        assert await service.get_allowed_languages(user_id) == {"es"}

    async def test_invalid_language_falls_back_to_default(self, service, library_setup, user_id) -> None:
        assert await service.get_allowed_routes(user_id, "klingon") == await service.get_allowed_routes(user_id, "es")
        assert await service.can_access(user_id, "/biblioteca", None) is True


class TestFailClosed:
    """Store failures and timeouts never grant access."""

    async def test_store_failure_denies(self, service, library_setup, user_id, monkeypatch) -> None:
        async def fail(*args, **kwargs):
            raise DataAccessError("user_roles.get_effective_for_user")

        monkeypatch.setattr(service.user_role_repo, "get_effective_for_user", fail)

        resolution = await service.resolve(user_id, "es")

        assert resolution.accessible_routes == frozenset()
        assert resolution.allowed_languages == {"es"}
        assert await service.get_allowed_routes(user_id, "es") == set()
        assert await service.get_allowed_languages(user_id) == {"es"}
        assert await service.get_accessible_menu(user_id, "es") == []
        assert await service.get_highest_role(user_id) is None

    async def test_public_routes_failure_denies_everything(self, service, seeder, user_id, monkeypatch) -> None:
        await seeder.route("/home", is_public=True)

        async def fail(*args, **kwargs):
            raise DataAccessError("routes.get_public_routes")

        monkeypatch.setattr(service.route_repo, "get_public_routes", fail)

        assert await service.get_allowed_routes(user_id, "es") == set()

    async def test_point_check_failure_denies(self, service, library_setup, user_id, monkeypatch) -> None:
        async def fail(*args, **kwargs):
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))

        monkeypatch.setattr(service.session, "execute", fail)

        assert await service.can_access(user_id, "/biblioteca", "es") is False

    async def test_connection_refused_denies(self, service, library_setup, user_id, monkeypatch, caplog) -> None:
        async def refuse(*args, **kwargs):
            raise ConnectionRefusedError(111, "Connect call failed")

        monkeypatch.setattr(service.session, "execute", refuse)

        with caplog.at_level(logging.ERROR, logger="routegate_api.services.route_access_service"):
            assert await service.can_access(user_id, "/biblioteca", "es") is False
            assert await service.get_allowed_routes(user_id, "es") == set()
            assert await service.get_allowed_languages(user_id) == {"es"}
            assert await service.get_accessible_menu(user_id, "es") == []
            assert (await service.get_user_permissions(user_id, "es")).accessible_routes == []
            assert await service.canonical_path("/biblioteca", "es") is None

        assert sum("denying" in record.getMessage() for record in caplog.records) >= 4

    async def test_repositories_wrap_driver_errors(self, seeder, db_session, monkeypatch) -> None:
        async def unreachable(*args, **kwargs):
            raise OSError("Network is unreachable")

        monkeypatch.setattr(db_session, "execute", unreachable)

        with pytest.raises(DataAccessError):
            await seeder.routes.get_public_routes()
        with pytest.raises(DataAccessError):
            await seeder.assignments.get_effective_for_user(uuid4())

    async def test_summary_failure(self, service, library_setup, user_id, monkeypatch) -> None:
        async def fail(*args, **kwargs):
            raise DataAccessError("route_permissions.get_active_for_roles")

        monkeypatch.setattr(service.role_permission_repo, "get_active_for_roles", fail)

        summary = await service.get_user_permissions(user_id, "es")

        assert summary.accessible_routes == []
        assert summary.roles == []
        assert summary.allowed_languages == ["es"]

    async def test_timeout_denies(self, db_session, settings, clock, library_setup, user_id, monkeypatch) -> None:
        settings = settings.model_copy(update={"resolution_timeout_seconds": 0.05})
        service = RouteAccessService(db_session, settings=settings, clock=clock)

        async def slow(*args, **kwargs):
            await asyncio.sleep(1)
            return []

        monkeypatch.setattr(service.override_repo, "get_effective_for_user", slow)

        assert await service.get_allowed_routes(user_id, "es") == set()

    async def test_timeout_denies_point_check(self, db_session, settings, clock, library_setup, user_id, monkeypatch) -> None:
        settings = settings.model_copy(update={"resolution_timeout_seconds": 0.05})
        service = RouteAccessService(db_session, settings=settings, clock=clock)

        async def slow(*args, **kwargs):
            await asyncio.sleep(1)
            return True

        monkeypatch.setattr(service.access_query, "can_access_route", slow)

        assert await service.can_access(user_id, "/biblioteca", "es") is False


class TestMenuAndSummary:
    """Menu, highest role and permission summary."""

    async def test_menu_entries(self, service, seeder, library_setup, user_id) -> None:
        await seeder.route("/home", translations={"es": "/inicio"}, is_public=True, show_in_menu=True, menu_order=1)
        await seeder.route("/help", is_public=True, menu_order=0)

        menu = await service.get_accessible_menu(user_id, "es")

        assert [entry.pathname for entry in menu] == ["/help", "/library", "/home"]
        library = next(entry for entry in menu if entry.pathname == "/library")
        assert library.translated_path == "/biblioteca"
        assert library.display_name == "Biblioteca"
        help_entry = menu[0]
        assert help_entry.translated_path == "/help"
        assert help_entry.is_public is True

    async def test_menu_only_flagged_routes(self, service, seeder, library_setup, user_id) -> None:
        await seeder.route("/home", is_public=True, show_in_menu=True)

        menu = await service.get_accessible_menu(user_id, "es", show_in_menu_only=True)

        assert [entry.pathname for entry in menu] == ["/home"]

    async def test_menu_skips_denied_routes(self, service, seeder, library_setup, user_id) -> None:
        await seeder.override(user_id, library_setup["route"], PermissionType.DENY)

        assert await service.get_accessible_menu(user_id, "es") == []

    async def test_menu_links_around_colliding_deny(self, service, seeder, library_setup, user_id) -> None:
        books = await seeder.route("/books", translations={"es": "/biblioteca"})
        await seeder.override(user_id, books, PermissionType.DENY)

        menu = await service.get_accessible_menu(user_id, "es")

        assert [entry.pathname for entry in menu] == ["/library"]
        assert menu[0].translated_path == "/library"
        assert menu[0].display_name == "Biblioteca"
        assert await service.can_access(user_id, menu[0].translated_path, "es") is True

    async def test_highest_role(self, service, seeder, library_setup, user_id) -> None:
        librarian = await seeder.role("librarian", hierarchy_level=5)
        await seeder.assign(user_id, librarian)

        role = await service.get_highest_role(user_id)

        assert role is not None
        assert role.name == "librarian"

    async def test_summary(self, service, seeder, library_setup, user_id) -> None:
        reports = await seeder.route("/reports")
        await seeder.override(user_id, reports, PermissionType.GRANT)

        summary = await service.get_user_permissions(user_id, "es")

        assert [role.name for role in summary.roles] == ["student"]
        assert summary.accessible_routes == ["/biblioteca", "/library", "/reports"]
        assert summary.allowed_languages == ["en", "es"]
        assert [o.route_id for o in summary.overrides] == [reports.id]


class TestNavigationAndCanonicalPaths:
    """Locale-prefixed guards and canonicalization."""

    async def test_guard_uses_locale_prefix(self, service, library_setup, user_id) -> None:
        decision = await service.check_navigation(user_id, "/es/biblioteca/")

        assert decision.allowed is True
        assert decision.language == "es"
        assert decision.path == "/biblioteca"

    async def test_guard_without_prefix_uses_default(self, service, library_setup, user_id) -> None:
        decision = await service.check_navigation(user_id, "/biblioteca?tab=new")

        assert decision.allowed is True
        assert decision.language == "es"

    async def test_guard_denies_other_language_path(self, service, library_setup, user_id) -> None:
        decision = await service.check_navigation(user_id, "/en/biblioteca")

        assert decision.allowed is False
        assert decision.language == "en"

    async def test_canonical_path(self, service, library_setup) -> None:
        assert await service.canonical_path("/biblioteca", "es") == "/library"
        assert await service.canonical_path("/library-en/", "en") == "/library"
        assert await service.canonical_path("/library", "fr") == "/library"
        assert await service.canonical_path("/biblioteca", "en") is None
        assert await service.canonical_path("/unknown", "es") is None


class TestRepositoryBoundaries:
    """Lifecycle operations used by administrators."""

    async def test_history_keeps_revoked_assignments(self, seeder, clock, library_setup, user_id) -> None:
        await seeder.assignments.revoke(library_setup["assignment"].id, revoked_at=clock.now)

        history = await seeder.assignments.get_history_for_user(user_id)

        assert len(history) == 1
        assert history[0].is_active is False
        assert history[0].revoked_at is not None

    async def test_system_role_cannot_be_deactivated(self, seeder) -> None:
        from routegate_api.exceptions import CannotModifySystemRoleError

        admin = await seeder.role("admin", is_system_role=True)

        with pytest.raises(CannotModifySystemRoleError):
            await seeder.roles.deactivate(admin.id)

    async def test_missing_rows_raise_not_found(self, seeder, clock) -> None:
        from routegate_api.exceptions import NotFoundError

        with pytest.raises(NotFoundError):
            await seeder.assignments.revoke(uuid4(), revoked_at=clock.now)
        with pytest.raises(NotFoundError):
            await seeder.routes.soft_delete(uuid4(), deleted_at=clock.now)
        with pytest.raises(NotFoundError):
            await seeder.overrides.expire(uuid4(), expires_at=clock.now)

    async def test_role_names_are_lowercased(self, seeder) -> None:
        role = await seeder.role("Student")

        assert role.name == "student"
        assert (await seeder.roles.get_by_name("student")).id == role.id
