from __future__ import annotations

import pytest

from app.core.config import settings
from app.core.security import verify_password
from tests.factories import create_user

pytestmark = pytest.mark.asyncio


async def _login(client, email, password="password123"):
    return await client.post("/api/v1/auth/login", json={"email": email, "password": password})


async def test_login_returns_token_and_sets_cookie(anon_client, db_session):
    await create_user(db_session, "sam@example.com")

    response = await _login(anon_client, "  SAM@example.com ")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    assert body["data"]["token_type"] == "bearer"
    assert body["data"]["user"]["email"] == "sam@example.com"
    assert "password_hash" not in body["data"]["user"]
    assert settings.SESSION_COOKIE_NAME in response.cookies


async def test_session_cookie_authenticates_follow_up_requests(anon_client, db_session):
    await create_user(db_session, "sam@example.com")
    await _login(anon_client, "sam@example.com")

    response = await anon_client.get("/api/v1/auth/me")

    assert response.status_code == 200
    assert response.json()["data"]["email"] == "sam@example.com"


async def test_bearer_token_authenticates(anon_client, db_session):
    await create_user(db_session, "sam@example.com")
    token = (await _login(anon_client, "sam@example.com")).json()["data"]["access_token"]
    anon_client.cookies.clear()

    response = await anon_client.get(
        "/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"}
    )

    assert response.status_code == 200


async def test_wrong_password_is_rejected(anon_client, db_session):
    await create_user(db_session, "sam@example.com")

    response = await _login(anon_client, "sam@example.com", "wrong-password")

    assert response.status_code == 401
    assert response.json()["msg"] == "Invalid email or password"


async def test_deactivated_account_cannot_log_in(anon_client, db_session):
    await create_user(db_session, "gone@example.com", is_active=False)

    response = await _login(anon_client, "gone@example.com")

    assert response.status_code == 401
    assert response.json()["msg"] == "Account is deactivated"


async def test_missing_or_bad_token_is_unauthorized(anon_client):
    missing = await anon_client.get("/api/v1/auth/me")
    garbage = await anon_client.get(
        "/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"}
    )

    assert missing.status_code == 401
    assert missing.json()["error_code"] == "UNAUTHORIZED"
    assert garbage.status_code == 401


async def test_logout_clears_cookie(anon_client, db_session):
    await create_user(db_session, "sam@example.com")
    await _login(anon_client, "sam@example.com")

    response = await anon_client.post("/api/v1/auth/logout")

    assert response.status_code == 200
    assert (await anon_client.get("/api/v1/auth/me")).status_code == 401


async def test_student_cannot_reach_admin_routes(client, login_as, student_user):
    login_as(student_user)

    response = await client.get("/api/v1/users")

    assert response.status_code == 403
    assert response.json()["error_code"] == "ADMIN_REQUIRED"


async def test_update_password(client, db_session, admin_user):
    rejected = await client.put(
        "/api/v1/auth/update-password",
        json={"current_password": "nope", "new_password": "brand-new"},
    )
    assert rejected.status_code == 400
    assert rejected.json()["msg"] == "Current password is incorrect"

    accepted = await client.put(
        "/api/v1/auth/update-password",
        json={"current_password": "password123", "new_password": "brand-new"},
    )
    assert accepted.status_code == 200
    await db_session.refresh(admin_user)
    assert verify_password("brand-new", admin_user.password_hash)
