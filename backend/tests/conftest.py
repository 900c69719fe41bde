"""Shared pytest fixtures for the route access test suite.

Provides:
- In-memory async SQLite database (no PostgreSQL needed for tests)
- AsyncSession bound to it
- A controllable clock for override expiry
- RouteAccessService wired to the session
- FastAPI test client (httpx.AsyncClient)
- AccessSeeder for building roles, routes, grants and overrides
"""

import os
from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Override settings BEFORE any app imports
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "false")

from routegate_api.config import Settings  # noqa: E402
from routegate_api.models.domain.override import PermissionType  # noqa: E402
from routegate_api.models.orm import Base  # noqa: E402
from routegate_api.models.orm.role import RoleORM  # noqa: E402
from routegate_api.models.orm.route import RouteORM  # noqa: E402
from routegate_api.models.orm.user_role import UserRoleORM  # noqa: E402
from routegate_api.models.orm.user_route_permission import UserRoutePermissionORM  # noqa: E402
from routegate_api.repositories import (  # noqa: E402
    RoleLanguageAccessRepository,
    RolePermissionRepository,
    RoleRepository,
    RouteRepository,
    UserRoleRepository,
    UserRoutePermissionRepository,
)
from routegate_api.services.route_access_service import RouteAccessService  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
FIXED_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


class FixedClock:
    """Clock returning a settable instant."""

    def __init__(self, now: datetime = FIXED_NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


class AccessSeeder:
    """Builds access data through the repositories."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.roles = RoleRepository(session)
        self.routes = RouteRepository(session)
        self.assignments = UserRoleRepository(session)
        self.role_permissions = RolePermissionRepository(session)
        self.overrides = UserRoutePermissionRepository(session)
        self.languages = RoleLanguageAccessRepository(session)

    async def role(
        self,
        name: str,
        hierarchy_level: int = 0,
        languages: tuple[str, ...] = (),
        is_system_role: bool = False,
    ) -> RoleORM:
        role = await self.roles.create_role(
            name=name,
            display_name=name.title(),
            hierarchy_level=hierarchy_level,
            is_system_role=is_system_role,
        )
        for language in languages:
            await self.languages.grant(role.name, language)
        return role

    async def route(
        self,
        pathname: str,
        translations: dict[str, str] | None = None,
        **fields,
    ) -> RouteORM:
        route = await self.routes.create_route(
            pathname=pathname,
            display_name=pathname.strip("/").title() or "Home",
            **fields,
        )
        for language, path in (translations or {}).items():
            await self.routes.add_translation(
                route.id,
                language,
                path,
                path.strip("/").title(),
            )
        return route

    async def assign(self, user_id: UUID, role: RoleORM) -> UserRoleORM:
        return await self.assignments.assign(user_id, role.id)

    async def grant_to_role(self, role: RoleORM, route: RouteORM) -> None:
        await self.role_permissions.grant(role.name, route.id)

    async def override(
        self,
        user_id: UUID,
        route: RouteORM,
        permission_type: PermissionType,
        expires_at: datetime | None = None,
    ) -> UserRoutePermissionORM:
        return await self.overrides.create_override(
            user_id=user_id,
            route_id=route.id,
            permission_type=permission_type,
            reason="test",
            expires_at=expires_at,
        )


# ---------------------------------------------------------------------------
# Database fixtures
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def db_engine():
    """Create an in-memory engine with the schema for one test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        # One shared connection so every session sees the same database
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Provide a DB session for seeding and service calls."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def clock() -> FixedClock:
    """Controllable clock starting at a fixed instant."""
    return FixedClock()


@pytest.fixture
def settings() -> Settings:
    """Settings for the test database."""
    return Settings(database_url=TEST_DATABASE_URL, default_language="es")


@pytest.fixture
def service(db_session, settings, clock) -> RouteAccessService:
    """RouteAccessService on the test session."""
    return RouteAccessService(db_session, settings=settings, clock=clock)


@pytest.fixture
def seeder(db_session) -> AccessSeeder:
    """Access data builder on the test session."""
    return AccessSeeder(db_session)


@pytest.fixture
def user_id() -> UUID:
    """A fresh user identifier."""
    return uuid4()


# ---------------------------------------------------------------------------
# App / HTTP client fixtures
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def app(session_factory):
    """Create a FastAPI app instance wired to the test database."""
    from routegate_api.database import get_db
    from routegate_api.main import create_app

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session
            await session.commit()

    test_app = create_app()
    test_app.dependency_overrides[get_db] = override_get_db
    yield test_app
    test_app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
