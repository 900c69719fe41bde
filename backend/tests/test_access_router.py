"""HTTP tests for the access router."""

from uuid import uuid4

import pytest

from routegate_api.models.domain.override import PermissionType


@pytest.fixture
async def seeded(db_session, seeder):
    """Student with a translated library route, a public home page and a denied page."""
    user_id = uuid4()
    student = await seeder.role("student", hierarchy_level=2, languages=("es", "en"))
    library = await seeder.route(
        "/library",
        translations={"es": "/biblioteca"},
        show_in_menu=True,
        menu_order=2,
    )
    await seeder.route("/home", translations={"es": "/inicio"}, is_public=True, show_in_menu=True)
    secret = await seeder.route("/secret", is_public=True)
    await seeder.grant_to_role(student, library)
    await seeder.assign(user_id, student)
    await seeder.override(user_id, secret, PermissionType.DENY)
    await db_session.commit()
    return user_id


async def test_health(client) -> None:
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


async def test_check_allowed_translated_path(client, seeded) -> None:
    response = await client.get(
        f"/api/v1/access/users/{seeded}/check",
        params={"pathname": "/biblioteca", "language": "es"},
    )

    assert response.status_code == 200
    assert response.json() == {"allowed": True}


async def test_check_denied_path(client, seeded) -> None:
    response = await client.get(
        f"/api/v1/access/users/{seeded}/check",
        params={"pathname": "/secret", "language": "es"},
    )

    assert response.status_code == 200
    assert response.json() == {"allowed": False}


async def test_check_requires_pathname(client, seeded) -> None:
    response = await client.get(f"/api/v1/access/users/{seeded}/check")

    assert response.status_code == 422


async def test_invalid_user_id_rejected(client) -> None:
    response = await client.get(
        "/api/v1/access/users/not-a-uuid/check",
        params={"pathname": "/home"},
    )

    assert response.status_code == 422


async def test_routes_sorted(client, seeded) -> None:
    response = await client.get(f"/api/v1/access/users/{seeded}/routes", params={"language": "es"})

    assert response.status_code == 200
    assert response.json() == {
        "language": "es",
        "routes": ["/biblioteca", "/home", "/inicio", "/library"],
    }


async def test_routes_invalid_language_uses_default(client, seeded) -> None:
    response = await client.get(f"/api/v1/access/users/{seeded}/routes", params={"language": "zz"})

    assert response.status_code == 200
    assert response.json()["language"] == "es"


async def test_routes_for_unknown_user(client, seeded) -> None:
    response = await client.get(f"/api/v1/access/users/{uuid4()}/routes", params={"language": "en"})

    assert response.status_code == 200
    assert response.json()["routes"] == ["/home", "/secret"]


async def test_languages(client, seeded) -> None:
    response = await client.get(f"/api/v1/access/users/{seeded}/languages")

    assert response.json() == {"languages": ["en", "es"]}


async def test_languages_default_for_user_without_roles(client, seeded) -> None:
    response = await client.get(f"/api/v1/access/users/{uuid4()}/languages")

    assert response.json() == {"languages": ["es"]}


async def test_menu(client, seeded) -> None:
    response = await client.get(
        f"/api/v1/access/users/{seeded}/menu",
        params={"language": "es", "show_in_menu_only": "true"},
    )

    body = response.json()
    assert response.status_code == 200
    assert body["total"] == 2
    assert [item["translated_path"] for item in body["items"]] == ["/inicio", "/biblioteca"]


async def test_summary(client, seeded) -> None:
    response = await client.get(f"/api/v1/access/users/{seeded}/summary", params={"language": "es"})

    body = response.json()
    assert response.status_code == 200
    assert [role["name"] for role in body["roles"]] == ["student"]
    assert "/secret" not in body["accessible_routes"]
    assert [o["permission_type"] for o in body["overrides"]] == ["deny"]


async def test_guard(client, seeded) -> None:
    allowed = await client.get(f"/api/v1/access/users/{seeded}/guard", params={"path": "/es/biblioteca"})
    denied = await client.get(f"/api/v1/access/users/{seeded}/guard", params={"path": "/en/secret"})

    assert allowed.json() == {"allowed": True, "language": "es", "path": "/biblioteca"}
    assert denied.json() == {"allowed": False, "language": "en", "path": "/secret"}


async def test_canonical(client, seeded) -> None:
    response = await client.get("/api/v1/access/canonical", params={"path": "/biblioteca", "language": "es"})

    assert response.json() == {"path": "/biblioteca", "canonical_path": "/library"}


async def test_security_headers(client) -> None:
    response = await client.get("/health")

    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["Cache-Control"] == "no-store, max-age=0"
