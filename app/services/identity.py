"""
Firebase Authentication as the identity provider.

User management and ID-token checks go through the Admin SDK (run in the
threadpool since those calls block); password sign-in has no Admin SDK
equivalent and goes to the Identity Toolkit REST API.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import httpx
from firebase_admin import auth
from firebase_admin import exceptions as firebase_exceptions
from starlette.concurrency import run_in_threadpool

from app.core.config import settings
from app.core.errors import (
    BadRequestError,
    ConflictError,
    InternalServerError,
    UnauthorizedError,
)

logger = logging.getLogger(__name__)


@dataclass
class Identity:
    uid: str
    email: str
    name: Optional[str] = None
    id_token: Optional[str] = None
    refresh_token: Optional[str] = None


class FirebaseIdentityProvider:
    """Thin async wrapper over Firebase Authentication"""

    def __init__(self, app=None, api_key: Optional[str] = None, base_url: Optional[str] = None,
                 timeout: float = 10.0):
        self.app = app
        self.api_key = api_key or settings.FIREBASE_WEB_API_KEY
        self.base_url = (base_url or settings.IDENTITY_TOOLKIT_URL).rstrip("/")
        self.timeout = timeout

    async def create_user(self, email: str, password: str, name: str) -> Identity:
        try:
            record = await run_in_threadpool(
                auth.create_user, email=email, password=password, display_name=name, app=self.app
            )
        except auth.EmailAlreadyExistsError as e:
            raise ConflictError("Email already exists") from e
        except ValueError as e:
            raise BadRequestError(str(e)) from e
        except firebase_exceptions.FirebaseError as e:
            logger.error("Firebase user creation failed: %s", e)
            raise BadRequestError("Registration failed") from e

        logger.info("Registered user %s", record.uid)
        return Identity(uid=record.uid, email=record.email, name=record.display_name)

    async def delete_user(self, uid: str) -> None:
        await run_in_threadpool(auth.delete_user, uid, app=self.app)

    async def sign_in(self, email: str, password: str) -> Identity:
        if not self.api_key:
            raise InternalServerError("FIREBASE_WEB_API_KEY is not configured")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.base_url}/accounts:signInWithPassword",
                    params={"key": self.api_key},
                    json={"email": email, "password": password, "returnSecureToken": True},
                )
        except httpx.HTTPError as e:
            logger.error("Identity Toolkit request failed: %s", e)
            raise InternalServerError("Authentication provider unavailable") from e

        if response.status_code != 200:
            reason = response.json().get("error", {}).get("message", "") if response.content else ""
            logger.warning("Sign-in rejected for %s: %s", email, reason or response.status_code)
            if reason.startswith("USER_DISABLED"):
                raise UnauthorizedError("User account is disabled")
            raise UnauthorizedError("Invalid email or password")

        body = response.json()
        return Identity(
            uid=body["localId"],
            email=body.get("email", email),
            name=body.get("displayName") or None,
            id_token=body.get("idToken"),
            refresh_token=body.get("refreshToken"),
        )

    async def verify_id_token(self, token: str) -> Optional[Identity]:
        """Return the identity behind a Firebase ID token, or None if it is not valid"""
        try:
            claims = await run_in_threadpool(auth.verify_id_token, token, app=self.app, check_revoked=True)
        except (auth.InvalidIdTokenError, auth.UserDisabledError, ValueError) as e:
            logger.debug("Firebase ID token rejected: %s", e)
            return None
        except auth.CertificateFetchError as e:
            logger.error("Could not fetch Firebase token certificates: %s", e)
            raise InternalServerError("Could not verify token") from e

        return Identity(uid=claims["uid"], email=claims.get("email", ""), name=claims.get("name"))

    async def revoke_sessions(self, uid: str) -> None:
        await run_in_threadpool(auth.revoke_refresh_tokens, uid, app=self.app)
