"""
Ticket and ticket category schemas
"""

from typing import Optional
from pydantic import BaseModel, Field

from app.models.ticket import TicketStatus

class TicketCategoryCreate(BaseModel):
    """Schema for creating a ticket category"""
    name: str = Field(..., min_length=1, max_length=100)
    price: float = Field(..., ge=0)
    stock: int = Field(..., ge=0)

class TicketCategoryUpdate(BaseModel):
    """Schema for updating a ticket category; available is derived and not writable"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    price: Optional[float] = Field(None, ge=0)
    stock: Optional[int] = Field(None, ge=0)

class TicketUpdate(BaseModel):
    """Schema for updating a ticket"""
    status: Optional[TicketStatus] = None

class GenerationResult(BaseModel):
    """Outcome of a ticket generation run"""
    generated_count: int
    total_count: int

class TicketQuery(BaseModel):
    """Filters and window for listing tickets"""
    user_id: Optional[str] = None
    ticket_category_id: Optional[str] = None
    status: Optional[TicketStatus] = None
    limit: int = 10
    offset: int = 0
