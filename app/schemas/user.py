"""
Auth and profile schemas
"""

from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator

from app.models.profile import Role

class RegisterRequest(BaseModel):
    """Registration payload"""
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)

class LoginRequest(BaseModel):
    """Login payload"""
    email: EmailStr
    password: str = Field(..., min_length=1)

class ProfileUpdate(BaseModel):
    """Self-service profile update"""
    name: str = Field(..., max_length=100)

    @field_validator("name")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Valid name is required")
        return value.strip()

class AdminProfileUpdate(ProfileUpdate):
    """Admin profile update, may also change the role"""
    role: Optional[Role] = None

class ProfileQuery(BaseModel):
    """Filters and page for listing profiles"""
    role: Optional[Role] = None
    search: Optional[str] = None
    page: int = 1
    limit: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit
