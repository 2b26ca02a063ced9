"""
Event model
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass
class Event:
    id: str
    admin_id: str
    title: str
    event_date: datetime
    location: str
    description: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, doc_id: str, data: Dict[str, Any]) -> "Event":
        return cls(
            id=doc_id,
            admin_id=data["admin_id"],
            title=data.get("title", ""),
            description=data.get("description") or "",
            event_date=data["event_date"],
            location=data.get("location", ""),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )
