"""
API tests for authentication, profiles and the error envelope
"""

from app.models import Role
from app.utils.security import CurrentUser

API = "/api/v1"


def test_health(client):
    response = client.get(f"{API}/health")
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "ok"


def test_health_only_under_api_prefix(client):
    assert client.get("/health").status_code == 404


def test_app_mounts_every_router():
    """Test the real application module imports and exposes the prefixed routes"""
    from main import app

    paths = {route.path for route in app.routes}
    assert f"{API}/health" in paths
    assert f"{API}/auth/login" in paths
    assert f"{API}/events/{{event_id}}" in paths
    assert f"{API}/ticket-categories/{{category_id}}/generate" in paths
    assert f"{API}/tickets/{{ticket_id}}" in paths


def test_register_and_me(client):
    response = client.post(f"{API}/auth/register", json={
        "name": "Nina New", "email": "nina@example.com", "password": "secret1"
    })
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    token = body["data"]["access_token"]

    response = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["data"]["email"] == "nina@example.com"


def test_register_invalid_payload(client):
    response = client.post(f"{API}/auth/register", json={
        "name": "Nina", "email": "not-an-email", "password": "123"
    })

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Invalid request data"
    assert {error["field"] for error in body["errors"]} == {"email", "password"}


def test_register_duplicate(client, identity):
    identity.add_account("taken@example.com", "secret1")

    response = client.post(f"{API}/auth/register", json={
        "name": "Dup", "email": "taken@example.com", "password": "secret1"
    })

    assert response.status_code == 409
    assert response.json() == {"success": False, "message": "Email already exists"}


def test_login_and_firebase_token(client, identity, user):
    identity.add_account("uma@example.com", "pw-uma", uid=user.id)

    response = client.post(f"{API}/auth/login", json={"email": "uma@example.com", "password": "pw-uma"})
    assert response.status_code == 200
    assert response.json()["data"]["user"]["role"] == "user"

    # A Firebase ID token is accepted as well
    response = client.get(f"{API}/users/me", headers={"Authorization": f"Bearer firebase-{user.id}"})
    assert response.status_code == 200
    assert response.json()["data"]["name"] == "Uma User"


def test_login_bad_credentials(client):
    response = client.post(f"{API}/auth/login", json={"email": "who@example.com", "password": "x"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid email or password"


def test_logout_revokes_firebase_token(client, identity, user):
    identity.add_account("uma@example.com", "pw-uma", uid=user.id)
    headers = {"Authorization": f"Bearer firebase-{user.id}"}

    response = client.post(f"{API}/auth/logout", headers=headers)
    assert response.status_code == 200

    response = client.get(f"{API}/auth/me", headers=headers)
    assert response.status_code == 401


def test_missing_token(client):
    response = client.get(f"{API}/auth/me")

    assert response.status_code == 401
    assert response.json()["message"] == "No token provided, authorization denied"


def test_invalid_token(client):
    response = client.get(f"{API}/auth/me", headers={"Authorization": "Bearer garbage"})

    assert response.status_code == 401
    assert response.json()["message"] == "Token is not valid"


def test_role_comes_from_profile(client, store, auth_headers, user):
    """Test a token minted while the user was admin no longer grants admin access"""
    stale = CurrentUser(id=user.id, email=user.email, role=Role.ADMIN)
    response = client.get(f"{API}/users", headers=auth_headers(stale))

    assert response.status_code == 403
    assert response.json()["message"] == "Admin access required"


def test_update_own_profile(client, auth_headers, user):
    response = client.put(f"{API}/users/me", json={"name": "Uma Renamed"}, headers=auth_headers(user))

    assert response.status_code == 200
    assert response.json()["data"]["name"] == "Uma Renamed"


def test_update_own_profile_blank(client, auth_headers, user):
    response = client.put(f"{API}/users/me", json={"name": "  "}, headers=auth_headers(user))

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "name"


def test_admin_lists_profiles(client, auth_headers, admin, user, other_user):
    response = client.get(f"{API}/users", params={"role": "user", "limit": 1}, headers=auth_headers(admin))

    assert response.status_code == 200
    body = response.json()
    assert len(body["data"]) == 1
    assert body["pagination"] == {"total": 2, "page": 1, "limit": 1, "pages": 2}


def test_admin_changes_role(client, store, auth_headers, admin, user):
    response = client.put(
        f"{API}/users/{user.id}", json={"name": "Uma", "role": "admin"}, headers=auth_headers(admin)
    )

    assert response.status_code == 200
    assert response.json()["data"]["role"] == "admin"
    assert store.profiles[user.id].is_admin


def test_user_cannot_read_other_profile(client, auth_headers, user, other_user):
    response = client.get(f"{API}/users/{other_user.id}", headers=auth_headers(user))
    assert response.status_code == 403


def test_unknown_route(client):
    response = client.get(f"{API}/nowhere")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": f"Cannot find {API}/nowhere on this server"}


def test_unexpected_error_envelope(client, auth_headers, user, profile_repo):
    async def explode(*args, **kwargs):
        raise RuntimeError("boom")

    profile_repo.update = explode

    response = client.put(f"{API}/users/me", json={"name": "Uma"}, headers=auth_headers(user))

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Something went wrong"
