"""
Tests for registration, login and logout
"""

import pytest

from app.core.errors import ConflictError, InternalServerError, StoreError, UnauthorizedError
from app.models import Role
from app.schemas.user import LoginRequest, RegisterRequest
from app.services.auth_service import AuthService


@pytest.fixture
def auth_service(identity, profile_repo, token_service):
    return AuthService(identity, profile_repo, token_service)


@pytest.mark.asyncio
async def test_register_creates_user_profile(auth_service, store, token_service):
    session = await auth_service.register(
        RegisterRequest(name="Nina New", email="nina@example.com", password="secret1")
    )

    user = session["user"]
    assert user["email"] == "nina@example.com"
    assert user["role"] == "user"
    assert store.profiles[user["id"]].role == Role.USER
    assert session["token_type"] == "bearer"
    assert session["refresh_token"] is None
    assert token_service.verify(session["access_token"])["sub"] == user["id"]


@pytest.mark.asyncio
async def test_register_duplicate_email(auth_service, identity):
    identity.add_account("taken@example.com", "secret1")

    with pytest.raises(ConflictError):
        await auth_service.register(
            RegisterRequest(name="Dup", email="taken@example.com", password="secret1")
        )


@pytest.mark.asyncio
async def test_register_rolls_back_auth_user(auth_service, identity, profile_repo, store):
    """Test the auth user is removed when its profile cannot be written"""
    profile_repo.fail_create = StoreError("Failed to create profile: unavailable")

    with pytest.raises(StoreError):
        await auth_service.register(
            RegisterRequest(name="Nina New", email="nina@example.com", password="secret1")
        )

    assert len(identity.deleted) == 1
    assert "nina@example.com" not in identity.accounts
    assert not store.profiles


@pytest.mark.asyncio
async def test_login_returns_profile_role(auth_service, identity, store, admin):
    identity.add_account("alice@example.com", "pw-alice", uid=admin.id)

    session = await auth_service.login(LoginRequest(email="alice@example.com", password="pw-alice"))

    assert session["user"]["id"] == admin.id
    assert session["user"]["name"] == "Alice Admin"
    assert session["user"]["role"] == "admin"
    assert session["refresh_token"] == f"refresh-{admin.id}"


@pytest.mark.asyncio
async def test_login_wrong_password(auth_service, identity):
    identity.add_account("alice@example.com", "pw-alice")

    with pytest.raises(UnauthorizedError):
        await auth_service.login(LoginRequest(email="alice@example.com", password="nope"))


@pytest.mark.asyncio
async def test_login_without_profile(auth_service, identity):
    identity.add_account("orphan@example.com", "pw")

    with pytest.raises(InternalServerError) as exc_info:
        await auth_service.login(LoginRequest(email="orphan@example.com", password="pw"))
    assert exc_info.value.message == "Failed to retrieve user profile"


@pytest.mark.asyncio
async def test_logout_revokes_sessions(auth_service, identity, user):
    await auth_service.logout(user)

    assert identity.revoked == [user.id]
