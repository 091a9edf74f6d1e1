"""User model."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    """An account that owns programs."""

    email: str
    name: str = ""
    id: int | None = None
    created_at: datetime | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
