"""
Event-related Pydantic schemas
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator

class EventCreate(BaseModel):
    """Schema for creating an event"""
    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    event_date: datetime
    location: str = Field(..., min_length=1, max_length=255)

    @field_validator("title", "location")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()

class EventUpdate(BaseModel):
    """Schema for updating an event; admin_id is never accepted"""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    event_date: Optional[datetime] = None
    location: Optional[str] = Field(None, min_length=1, max_length=255)

    @field_validator("title", "location")
    @classmethod
    def not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()

class EventQuery(BaseModel):
    """Filters and window for listing events"""
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    location: Optional[str] = None
    admin_id: Optional[str] = None
    limit: int = 10
    offset: int = 0
