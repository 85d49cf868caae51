"""Authentication and app-wide behavior tests."""

from unittest.mock import AsyncMock, patch
from uuid import uuid4

from eduassist.api.deps import create_access_token, decode_access_token
from eduassist.api.routes import auth as auth_routes
from eduassist.db import repository
from eduassist.messages import t


async def test_health_check(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


async def test_current_user_requires_token(client):
    response = await client.get("/api/auth/user")

    assert response.status_code == 401
    assert response.json() == {"message": t("not_authenticated"), "code": 401}
    assert response.headers["www-authenticate"] == "Bearer"


async def test_invalid_token_is_rejected(client):
    response = await client.get("/api/auth/user", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
    assert response.json()["message"] == t("invalid_credentials")


async def test_token_for_deleted_user_is_rejected(client):
    client.cookies.set("access_token", create_access_token(uuid4()))

    with patch.object(repository, "get_user", AsyncMock(return_value=None)):
        response = await client.get("/api/auth/user")

    assert response.status_code == 401


async def test_current_user_includes_subscription_status(client, make_user):
    user = make_user(current_plan=None, subscription_expires_at=None, sessions_remaining=0)
    token = create_access_token(user.id)

    with patch.object(repository, "get_user", AsyncMock(return_value=user)):
        response = await client.get("/api/auth/user", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == str(user.id)
    assert body["subscription_status"] == "inactive"
    assert body["sessions_remaining"] == 0


def test_access_token_round_trip():
    user_id = uuid4()

    assert decode_access_token(create_access_token(user_id)) == user_id
    assert decode_access_token("garbage") is None


async def test_google_login_upserts_user_and_sets_cookie(client, user):
    idinfo = {
        "iss": "https://accounts.google.com",
        "sub": "google-123",
        "email": "Student@Example.com",
        "email_verified": True,
        "given_name": "Sara",
        "family_name": "Ahmed",
        "picture": "https://example.com/p.png",
    }

    with patch.object(auth_routes.google_id_token, "verify_oauth2_token", return_value=idinfo), \
         patch.object(repository, "upsert_user", AsyncMock(return_value=user)) as upsert:
        response = await client.post("/api/auth/google", json={"id_token": "token-from-google"})

    assert response.status_code == 200
    body = response.json()
    assert decode_access_token(body["access_token"]) == user.id
    assert "access_token" in response.cookies
    upsert.assert_awaited_once()
    assert upsert.await_args.kwargs["external_id"] == "google-123"
    assert upsert.await_args.kwargs["email"] == "student@example.com"


async def test_google_login_drops_unverified_email(client, user):
    idinfo = {"iss": "accounts.google.com", "sub": "google-456", "email": "x@example.com", "email_verified": False}

    with patch.object(auth_routes.google_id_token, "verify_oauth2_token", return_value=idinfo), \
         patch.object(repository, "upsert_user", AsyncMock(return_value=user)) as upsert:
        response = await client.post("/api/auth/google", json={"id_token": "t"})

    assert response.status_code == 200
    assert upsert.await_args.kwargs["email"] is None


async def test_google_login_rejects_bad_token(client):
    with patch.object(auth_routes.google_id_token, "verify_oauth2_token", side_effect=ValueError("bad signature")), \
         patch.object(repository, "upsert_user", AsyncMock()) as upsert:
        response = await client.post("/api/auth/google", json={"id_token": "forged"})

    assert response.status_code == 401
    upsert.assert_not_awaited()


async def test_logout_clears_cookie(client):
    response = await client.post("/api/auth/logout")

    assert response.status_code == 204
    set_cookie = response.headers["set-cookie"].lower()
    assert set_cookie.startswith("access_token=")
    assert "max-age=0" in set_cookie
