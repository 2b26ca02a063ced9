"""
User profile model
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class Role(str, Enum):
    ADMIN = "admin"
    USER = "user"


@dataclass
class Profile:
    id: str
    name: str
    role: Role = Role.USER
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @classmethod
    def from_dict(cls, doc_id: str, data: Dict[str, Any]) -> "Profile":
        return cls(
            id=doc_id,
            name=data.get("name", ""),
            role=Role(data.get("role", Role.USER.value)),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )
