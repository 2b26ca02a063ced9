"""
Security utilities: locally signed access tokens and the caller identity
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi.security import HTTPBearer
from jose import JWTError, jwt

from app.core.config import settings
from app.models.profile import Role

logger = logging.getLogger(__name__)

# auto_error is off so a missing header goes through the standard error envelope
security = HTTPBearer(auto_error=False)


@dataclass
class CurrentUser:
    """Authenticated caller attached to the request"""
    id: str
    email: str
    role: Role = Role.USER
    token: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class TokenService:
    """Issues and verifies HS256 access tokens carrying id, email and role"""

    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: Optional[str] = None,
        expiry_minutes: Optional[int] = None,
    ):
        self.secret_key = secret_key or settings.JWT_SECRET
        self.algorithm = algorithm or settings.JWT_ALGORITHM
        self.expiry_minutes = expiry_minutes or settings.JWT_EXPIRY_MINUTES

    def issue(self, user_id: str, email: str, role: Role) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "sub": user_id,
            "email": email,
            "role": role.value,
            "iat": now,
            "exp": now + timedelta(minutes=self.expiry_minutes),
        }
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> Optional[Dict[str, Any]]:
        """Return the token claims, or None if the token is not one of ours or is invalid"""
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.debug("Local token verification failed: %s", e)
            return None

        if not all(payload.get(key) for key in ("sub", "email")):
            return None
        return payload
