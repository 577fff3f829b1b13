# loyaltea/core/config.py
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

OfferProvider = Literal["mailchimp", "mailgun"]


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (MongoDB connection string)
      - JWT_SECRET (signing key for bearer tokens)

    Optional:
      - DBNAME (defaults to "loyaltea")
      - OFFER_PROVIDER: which webhook wire shape is routed ("mailchimp" JSON
        or "mailgun" form-encoded)
      - MAILCHIMP_API_KEY + MAILCHIMP_LIST_ID: when both are set, offer
        senders are subscribed to the list before the offer is stored
    """

    PROJECT_NAME: str = "Loyaltea API"

    # MongoDB
    DATABASE_URL: str
    DBNAME: str = "loyaltea"

    # Bearer tokens
    JWT_SECRET: str
    JWT_ALG: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Offer webhook
    OFFER_PROVIDER: OfferProvider = "mailchimp"

    # Mailing list (optional side effect of offer ingestion)
    MAILCHIMP_API_KEY: str | None = None
    MAILCHIMP_LIST_ID: str | None = None

    CORS_ORIGINS: list[str] = []

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def mailing_list_enabled(self) -> bool:
        return bool(self.MAILCHIMP_API_KEY and self.MAILCHIMP_LIST_ID)


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
