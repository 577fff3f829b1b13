# loyaltea/services/offer_service.py
import logging
from datetime import datetime, timezone

from loyaltea.core.errors import ErrorKind, ServiceError
from loyaltea.core.mailing_list import MailchimpSubscriber
from loyaltea.core.validators import is_valid_email
from loyaltea.models.offer import Offer
from loyaltea.repositories.offer_repo import OfferRepository
from loyaltea.schemas.offer import OfferPayload

logger = logging.getLogger(__name__)


class OfferService:
    """
    Ingests offers received through the provider webhook.

    Steps:
      1. Validate the sender address (required, well-formed).
      2. If a mailing list is configured, subscribe the sender. A failure
         aborts ingestion: nothing is stored.
      3. Store the offer with a server-assigned createdAt.
    """

    def __init__(
        self,
        repo: OfferRepository,
        subscriber: MailchimpSubscriber | None = None,
    ):
        self.repo = repo
        self.subscriber = subscriber

    def ingest(self, payload: OfferPayload) -> Offer:
        sender = payload.sender_email
        if not sender or not is_valid_email(sender):
            raise ServiceError(ErrorKind.INVALID_PAYLOAD, "missing or malformed sender email")

        if self.subscriber is not None:
            self.subscriber.subscribe(sender)

        offer = Offer(
            sender_email=sender,
            subject=payload.subject,
            body=payload.body,
            brand=payload.brand,
            source=payload.source,
            tags=payload.tags,
            created_at=datetime.now(timezone.utc),
        )
        self.repo.insert(offer)
        logger.info("Stored offer %s", offer.id)
        return offer
