# loyaltea/models/offer.py
from datetime import datetime
from typing import Any

from sqlmodel import Field, SQLModel


class Offer(SQLModel):
    """
    A forwarded promotional email, stored in the `offers` collection.

    Offers are insert-only: created once on webhook ingestion and never
    updated or deleted. There is no relation to User and no deduplication.
    """

    id: str | None = Field(default=None, description="Hex ObjectId assigned by the store")

    sender_email: str = Field(description="Email of the user who forwarded it")
    subject: str = Field(default="", description="Subject line of the email")
    body: str = Field(default="", description="Plain text body")

    # Optional classification
    brand: str = Field(default="", description='Parsed brand, e.g. "Zara"')
    source: str = Field(default="", description='Origin, e.g. "email"')
    tags: list[str] = Field(default_factory=list, description='e.g. ["discount"]')

    created_at: datetime | None = Field(default=None, description="When this offer was received")

    def to_document(self) -> dict[str, Any]:
        """Mongo document; empty optional fields are omitted."""
        doc: dict[str, Any] = {
            "senderEmail": self.sender_email,
            "subject": self.subject,
            "body": self.body,
            "createdAt": self.created_at,
        }
        if self.brand:
            doc["brand"] = self.brand
        if self.source:
            doc["source"] = self.source
        if self.tags:
            doc["tags"] = list(self.tags)
        return doc
