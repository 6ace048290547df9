from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class Account:
    """User identity row"""
    username: str
    password_hash: str
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: dict):
        """Create Account from database row"""
        created_at = data.get("created_at")
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        return cls(
            id=data.get("id"),
            username=data["username"],
            password_hash=data["password_hash"],
            created_at=created_at,
        )
