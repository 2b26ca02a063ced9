"""
Common Pydantic schemas
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel

class StandardResponse(BaseModel):
    """Standard API response"""
    success: bool
    message: str
    data: Optional[Any] = None
    pagination: Optional[Dict[str, Any]] = None

class ErrorResponse(BaseModel):
    """Error response schema"""
    success: bool = False
    message: str
    errors: Optional[Any] = None
    stack: Optional[str] = None

class OffsetPagination(BaseModel):
    """Pagination metadata for limit/offset listings"""
    total: int
    limit: int
    offset: int

class PagePagination(BaseModel):
    """Pagination metadata for page/limit listings"""
    total: int
    page: int
    limit: int
    pages: int
