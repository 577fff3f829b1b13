# loyaltea/repositories/offer_repo.py
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from loyaltea.core.errors import ErrorKind, ServiceError
from loyaltea.models.offer import Offer


class OfferRepository:
    """Insert-only access to the offers collection."""

    def __init__(self, collection: Collection):
        self.collection = collection

    def insert(self, offer: Offer) -> str:
        """Insert a new Offer and return its id."""
        try:
            result = self.collection.insert_one(offer.to_document())
        except PyMongoError as exc:
            raise ServiceError(ErrorKind.STORE_UNAVAILABLE, str(exc)) from exc
        offer.id = str(result.inserted_id)
        return offer.id
