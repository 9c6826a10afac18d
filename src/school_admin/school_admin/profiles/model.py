from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Profile:
    """Application-facing user record. `profile_id` is the identity id."""

    profile_id: str
    name: str
    email: str
    role: Role
    class_name: Optional[str] = None
    subject: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.profile_id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "class": self.class_name,
            "subject": self.subject,
            "created_at": self.created_at.strftime("%Y-%m-%d %H:%M") if self.created_at else None,
        }
