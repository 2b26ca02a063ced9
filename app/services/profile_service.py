"""
User profile service.

Two tiers: a user may read and rename their own profile; an admin may read,
list and update any profile, including its role.
"""

import logging
from typing import List, Tuple

from app.core.errors import ForbiddenError, NotFoundError
from app.models import Profile
from app.schemas.user import AdminProfileUpdate, ProfileQuery, ProfileUpdate
from app.utils.security import CurrentUser

logger = logging.getLogger(__name__)


def require_self_or_admin(caller: CurrentUser, profile_id: str) -> None:
    if caller.id != profile_id and not caller.is_admin:
        raise ForbiddenError("Permission denied")


class ProfileService:
    """Service for reading and updating profiles"""

    def __init__(self, profiles):
        self.profiles = profiles

    async def get_profile(self, profile_id: str, caller: CurrentUser) -> Profile:
        require_self_or_admin(caller, profile_id)
        profile = await self.profiles.get_by_id(profile_id)
        if not profile:
            raise NotFoundError("Profile not found")
        return profile

    async def update_own_profile(self, caller: CurrentUser, data: ProfileUpdate) -> Profile:
        await self.get_profile(caller.id, caller)
        return await self.profiles.update(caller.id, {"name": data.name})

    async def list_profiles(self, query: ProfileQuery, caller: CurrentUser) -> Tuple[List[Profile], int]:
        if not caller.is_admin:
            raise ForbiddenError("Permission denied")
        profiles = await self.profiles.find(query)
        total = await self.profiles.count(query)
        return profiles, total

    async def update_profile(
        self, profile_id: str, data: AdminProfileUpdate, caller: CurrentUser
    ) -> Profile:
        if not caller.is_admin:
            raise ForbiddenError("Permission denied")
        profile = await self.get_profile(profile_id, caller)

        changes = {"name": data.name}
        if data.role is not None:
            changes["role"] = data.role.value
            if data.role != profile.role:
                logger.info("Role of %s changed from %s to %s by %s",
                            profile_id, profile.role.value, data.role.value, caller.id)
        return await self.profiles.update(profile_id, changes)
