"""
Ticket and ticket category models
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class TicketStatus(str, Enum):
    AVAILABLE = "available"
    USED = "used"
    CANCELLED = "cancelled"


@dataclass
class TicketCategory:
    id: str
    event_id: str
    name: str
    price: float
    stock: int
    available: int = 0
    # Number of tickets ever generated for the category; guarded by the
    # generation transaction.
    issued_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, doc_id: str, data: Dict[str, Any]) -> "TicketCategory":
        return cls(
            id=doc_id,
            event_id=data["event_id"],
            name=data.get("name", ""),
            price=float(data.get("price", 0)),
            stock=int(data.get("stock", 0)),
            available=int(data.get("available", 0)),
            issued_count=int(data.get("issued_count", 0)),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )


@dataclass
class Ticket:
    id: str
    ticket_category_id: str
    ticket_code: str
    status: TicketStatus = TicketStatus.AVAILABLE
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_assigned(self) -> bool:
        return self.user_id is not None

    @classmethod
    def from_dict(cls, doc_id: str, data: Dict[str, Any]) -> "Ticket":
        return cls(
            id=doc_id,
            ticket_category_id=data["ticket_category_id"],
            ticket_code=data["ticket_code"],
            status=TicketStatus(data.get("status", TicketStatus.AVAILABLE.value)),
            user_id=data.get("user_id"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ticket_category_id": self.ticket_category_id,
            "ticket_code": self.ticket_code,
            "status": self.status.value,
            "user_id": self.user_id,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
