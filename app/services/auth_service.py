"""
Registration, login and logout
"""

import logging
from typing import Any, Dict

from app.core.errors import AppError, InternalServerError
from app.models import Profile, Role
from app.schemas.user import LoginRequest, RegisterRequest
from app.services.identity import Identity
from app.utils.security import CurrentUser, TokenService

logger = logging.getLogger(__name__)


class AuthService:
    """Service for account lifecycle against the identity provider"""

    def __init__(self, identity, profiles, tokens: TokenService):
        self.identity = identity
        self.profiles = profiles
        self.tokens = tokens

    async def register(self, data: RegisterRequest) -> Dict[str, Any]:
        identity = await self.identity.create_user(data.email, data.password, data.name)
        try:
            profile = await self.profiles.create(identity.uid, {"name": data.name, "role": Role.USER.value})
        except AppError:
            # Do not leave an auth user behind without a profile
            await self.identity.delete_user(identity.uid)
            raise
        return self._session(identity, profile)

    async def login(self, data: LoginRequest) -> Dict[str, Any]:
        identity = await self.identity.sign_in(data.email, data.password)
        profile = await self.profiles.get_by_id(identity.uid)
        if not profile:
            raise InternalServerError("Failed to retrieve user profile")
        logger.info("User %s logged in", identity.uid)
        return self._session(identity, profile)

    async def logout(self, user: CurrentUser) -> None:
        await self.identity.revoke_sessions(user.id)
        logger.info("User %s logged out", user.id)

    def _session(self, identity: Identity, profile: Profile) -> Dict[str, Any]:
        return {
            "user": {
                "id": identity.uid,
                "email": identity.email,
                "name": profile.name,
                "role": profile.role.value,
            },
            "access_token": self.tokens.issue(identity.uid, identity.email, profile.role),
            "refresh_token": identity.refresh_token,
            "token_type": "bearer",
        }
