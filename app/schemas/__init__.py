"""
Pydantic schemas package
"""

from .common import *
from .event import *
from .ticket import *
from .user import *

__all__ = [
    "StandardResponse",
    "ErrorResponse",
    "OffsetPagination",
    "PagePagination",
    "EventCreate",
    "EventUpdate",
    "EventQuery",
    "TicketCategoryCreate",
    "TicketCategoryUpdate",
    "TicketUpdate",
    "TicketQuery",
    "GenerationResult",
    "RegisterRequest",
    "LoginRequest",
    "ProfileUpdate",
    "AdminProfileUpdate",
    "ProfileQuery",
]
