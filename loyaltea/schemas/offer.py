# loyaltea/schemas/offer.py
from sqlmodel import Field, SQLModel


class OfferPayload(SQLModel):
    """
    Provider-neutral offer webhook payload.

    Produced by a wire decoder (JSON or form) from the provider's own keys.
    Only `sender_email` is required; it is validated by OfferService.
    """

    sender_email: str = ""
    subject: str = ""
    body: str = ""
    brand: str = ""
    source: str = ""
    tags: list[str] = Field(default_factory=list)
