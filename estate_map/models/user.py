"""User model, consumed for identity only."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from estate_map.models.enums import UserStatus


@dataclass
class GoogleProfile:
    """Identity fields handed over by the OAuth callback."""

    google_id: str
    email: str
    first_name: str
    last_name: str
    picture: str | None = None


@dataclass
class User:
    """Registered user."""

    user_id: str
    google_id: str
    email: str
    display_name: str
    profile_picture: str | None = None
    status: UserStatus = UserStatus.ACTIVE
    created_at: datetime | None = None
    last_login: datetime | None = None

    def to_document(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "google_id": self.google_id,
            "email": self.email,
            "display_name": self.display_name,
            "profile_picture": self.profile_picture,
            "status": self.status.value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "last_login": self.last_login.isoformat() if self.last_login else None,
        }

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "User":
        created_at = doc.get("created_at")
        last_login = doc.get("last_login")
        return cls(
            user_id=doc["user_id"],
            google_id=doc["google_id"],
            email=doc["email"],
            display_name=doc["display_name"],
            profile_picture=doc.get("profile_picture"),
            status=UserStatus(doc.get("status", UserStatus.ACTIVE.value)),
            created_at=datetime.fromisoformat(created_at) if created_at else None,
            last_login=datetime.fromisoformat(last_login) if last_login else None,
        )
