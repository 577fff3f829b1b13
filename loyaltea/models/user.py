# loyaltea/models/user.py
from datetime import datetime, timezone
from typing import Any

from bson import ObjectId
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel):
    """
    Persistent user account, stored in the `users` collection.

    Identity:
      - id: hex string of the Mongo `_id` (None until inserted)

    Password:
      - `password` only ever holds the Argon2 digest; plaintext never
        reaches this model. Read schemas never expose it.

    Email is unique across users (unique index + pre-check on write).
    """

    id: str | None = Field(default=None, description="Hex ObjectId assigned by the store")

    email: str = Field(description="Login email, exact-match unique")

    password: str = Field(default="", description="Argon2 digest of the password")

    name: str = Field(description="Display name")

    created_at: datetime = Field(
        default_factory=utcnow,
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=utcnow,
        description="Last update timestamp (UTC)",
    )

    def to_document(self) -> dict[str, Any]:
        """Mongo document for insert; `_id` is left to the store."""
        return {
            "email": self.email,
            "password": self.password,
            "name": self.name,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "User":
        return cls(
            id=str(doc["_id"]) if isinstance(doc.get("_id"), ObjectId) else doc.get("_id"),
            email=doc["email"],
            password=doc.get("password", ""),
            name=doc.get("name", ""),
            created_at=doc.get("created_at") or utcnow(),
            updated_at=doc.get("updated_at") or utcnow(),
        )
