"""Integration tests for member accounts, the coach directory and admin management."""

from decimal import Decimal

import pytest
from libs.auth.models import UserRole
from tests.factories import (
    CoachFactory,
    UserFactory,
    auth_headers,
    make_auth_user,
    override_auth,
    persist,
)
from services.gateway_service.app.main import app


@pytest.mark.asyncio
@pytest.mark.integration
async def test_health_and_request_id(client):
    response = await client.get("/health", headers={"X-Request-ID": "req-123"})

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert response.headers["X-Request-ID"] == "req-123"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_me_requires_token(client):
    response = await client.get("/api/v1/members/me")

    assert response.status_code == 401


@pytest.mark.asyncio
@pytest.mark.integration
async def test_me_returns_own_account(client, db_session):
    student = await persist(db_session, UserFactory.create(first_name="Sam"))

    response = await client.get("/api/v1/members/me", headers=auth_headers(student))

    assert response.status_code == 200
    assert response.json()["id"] == student.id
    assert response.json()["first_name"] == "Sam"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_coach_directory_lists_active_coaches(client, db_session):
    student = await persist(db_session, UserFactory.create())
    coach = await persist(db_session, CoachFactory.create(last_name="Alvarez"))
    await persist(db_session, CoachFactory.create(last_name="Zed", is_active=False))

    with override_auth(app, make_auth_user(student.id)):
        response = await client.get("/api/v1/members/coaches")

    assert response.status_code == 200
    assert [c["id"] for c in response.json()] == [coach.id]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_admin_creates_and_updates_member(client, db_session):
    admin = await persist(db_session, UserFactory.create(role=UserRole.ADMIN))
    headers = auth_headers(admin)

    created = await client.post(
        "/api/v1/admin/members",
        json={
            "email": "Coach.New@Example.com",
            "first_name": "Nia",
            "last_name": "Park",
            "role": "coach",
            "hourly_rate": "75.00",
        },
        headers=headers,
    )
    assert created.status_code == 201, created.text
    body = created.json()
    assert body["email"] == "coach.new@example.com"
    assert Decimal(body["hourly_rate"]) == Decimal("75.00")

    duplicate = await client.post(
        "/api/v1/admin/members",
        json={"email": "coach.new@example.com", "first_name": "A", "last_name": "B"},
        headers=headers,
    )
    assert duplicate.status_code == 400
    assert duplicate.json() == {"detail": "A user with this email already exists"}

    updated = await client.patch(
        f"/api/v1/admin/members/{body['id']}",
        json={"is_active": False},
        headers=headers,
    )
    assert updated.status_code == 200
    assert updated.json()["is_active"] is False


@pytest.mark.asyncio
@pytest.mark.integration
async def test_admin_routes_reject_non_admins(client, db_session):
    coach = await persist(db_session, CoachFactory.create())

    response = await client.patch(
        f"/api/v1/admin/members/{coach.id}",
        json={"is_active": False},
        headers=auth_headers(coach),
    )

    assert response.status_code == 403


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_missing_member_is_not_found(client, db_session):
    admin = await persist(db_session, UserFactory.create(role=UserRole.ADMIN))

    response = await client.patch(
        "/api/v1/admin/members/4242", json={"role": "coach"}, headers=auth_headers(admin)
    )

    assert response.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_own_profile(client, db_session):
    student = await persist(db_session, UserFactory.create(first_name="Sam", last_name="Lee"))

    response = await client.patch(
        "/api/v1/members/me",
        json={"first_name": "Samira", "bio": "Left-handed, loves dinking."},
        headers=auth_headers(student),
    )

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["first_name"] == "Samira"
    assert body["last_name"] == "Lee"
    assert body["bio"] == "Left-handed, loves dinking."


@pytest.mark.asyncio
@pytest.mark.integration
async def test_profile_update_rejects_overlong_name(client, db_session):
    student = await persist(db_session, UserFactory.create())

    response = await client.patch(
        "/api/v1/members/me",
        json={"first_name": "x" * 101},
        headers=auth_headers(student),
    )

    assert response.status_code == 422


@pytest.mark.asyncio
@pytest.mark.integration
async def test_avatar_upload_replace_and_remove(client, db_session, asset_store):
    coach = await persist(db_session, CoachFactory.create())
    headers = auth_headers(coach)

    first = await client.post(
        "/api/v1/members/me/avatar",
        files={"file": ("me.png", b"first", "image/png")},
        headers=headers,
    )
    assert first.status_code == 200, first.text
    first_url = first.json()["profile_image_url"]
    assert first_url.startswith("/uploads/avatar/")

    second = await client.post(
        "/api/v1/members/me/avatar",
        files={"file": ("me.jpg", b"second", "image/jpeg")},
        headers=headers,
    )
    second_url = second.json()["profile_image_url"]
    assert second_url != first_url
    old_key = asset_store.key_from_url(first_url)
    assert not asset_store.path_for(old_key).exists()

    linked = await client.get(
        "/api/v1/assets",
        params={"object_type": "user", "object_id": coach.id},
        headers=headers,
    )
    assert [a["url"] for a in linked.json()] == [second_url]

    removed = await client.delete("/api/v1/members/me/avatar", headers=headers)
    assert removed.status_code == 200
    assert removed.json()["profile_image_url"] is None


@pytest.mark.asyncio
@pytest.mark.integration
async def test_avatar_must_be_an_image(client, db_session):
    student = await persist(db_session, UserFactory.create())

    response = await client.post(
        "/api/v1/members/me/avatar",
        files={"file": ("clip.mp4", b"video", "video/mp4")},
        headers=auth_headers(student),
    )

    assert response.status_code == 400
    me = await client.get("/api/v1/members/me", headers=auth_headers(student))
    assert me.json()["profile_image_url"] is None


@pytest.mark.asyncio
@pytest.mark.integration
async def test_admin_lists_all_members(client, db_session):
    admin = await persist(db_session, UserFactory.create(role=UserRole.ADMIN))
    coach = await persist(db_session, CoachFactory.create(is_active=False))
    student = await persist(db_session, UserFactory.create())

    response = await client.get("/api/v1/admin/members", headers=auth_headers(admin))

    assert response.status_code == 200
    assert [u["id"] for u in response.json()] == [student.id, coach.id, admin.id]

    forbidden = await client.get("/api/v1/admin/members", headers=auth_headers(student))
    assert forbidden.status_code == 403
