"""
Tests for profile reads and updates
"""

import pytest

from app.core.errors import ForbiddenError, NotFoundError
from app.models import Role
from app.schemas.user import AdminProfileUpdate, ProfileQuery, ProfileUpdate


@pytest.mark.asyncio
async def test_get_own_profile(profile_service, user):
    profile = await profile_service.get_profile(user.id, user)

    assert profile.name == "Uma User"
    assert profile.role == Role.USER


@pytest.mark.asyncio
async def test_user_cannot_read_others(profile_service, user, other_user):
    with pytest.raises(ForbiddenError):
        await profile_service.get_profile(other_user.id, user)


@pytest.mark.asyncio
async def test_admin_reads_any_profile(profile_service, admin, user):
    profile = await profile_service.get_profile(user.id, admin)
    assert profile.id == user.id


@pytest.mark.asyncio
async def test_missing_profile(profile_service, admin):
    with pytest.raises(NotFoundError):
        await profile_service.get_profile("ghost", admin)


@pytest.mark.asyncio
async def test_update_own_name(profile_service, store, user):
    profile = await profile_service.update_own_profile(user, ProfileUpdate(name="  Uma Updated "))

    assert profile.name == "Uma Updated"
    assert store.profiles[user.id].role == Role.USER


def test_blank_name_rejected():
    with pytest.raises(ValueError):
        ProfileUpdate(name="   ")


@pytest.mark.asyncio
async def test_list_profiles_admin_only(profile_service, user):
    with pytest.raises(ForbiddenError):
        await profile_service.list_profiles(ProfileQuery(), user)


@pytest.mark.asyncio
async def test_list_profiles_filters(profile_service, admin, other_admin, user, other_user):
    profiles, total = await profile_service.list_profiles(ProfileQuery(role=Role.USER), admin)
    assert total == 2
    assert {p.id for p in profiles} == {user.id, other_user.id}

    profiles, total = await profile_service.list_profiles(ProfileQuery(search="victor"), admin)
    assert total == 1
    assert profiles[0].id == other_user.id


@pytest.mark.asyncio
async def test_list_profiles_pages(profile_service, store, admin, other_admin, user, other_user):
    store.profiles[user.id].created_at = store.now()

    first, total = await profile_service.list_profiles(ProfileQuery(page=1, limit=3), admin)
    second, _ = await profile_service.list_profiles(ProfileQuery(page=2, limit=3), admin)

    assert total == 4
    # Newest first
    assert first[0].id == user.id
    assert len(second) == 1
    assert not {p.id for p in first} & {p.id for p in second}


@pytest.mark.asyncio
async def test_admin_promotes_user(profile_service, store, admin, user):
    profile = await profile_service.update_profile(
        user.id, AdminProfileUpdate(name="Uma Admin", role=Role.ADMIN), admin
    )

    assert profile.role == Role.ADMIN
    assert store.profiles[user.id].name == "Uma Admin"


@pytest.mark.asyncio
async def test_user_cannot_change_roles(profile_service, user):
    with pytest.raises(ForbiddenError):
        await profile_service.update_profile(
            user.id, AdminProfileUpdate(name="Me", role=Role.ADMIN), user
        )
