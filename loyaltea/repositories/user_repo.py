# loyaltea/repositories/user_repo.py
from bson import ObjectId
from pymongo import ASCENDING
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError, PyMongoError

from loyaltea.core.errors import ErrorKind, ServiceError
from loyaltea.models.user import User


def parse_object_id(user_id: str) -> ObjectId:
    """
    Convert a hex id from the URL into an ObjectId.

    Raises:
        ServiceError(INVALID_ID): if `user_id` is not a 24-char hex string.
    """
    if not ObjectId.is_valid(user_id):
        raise ServiceError(ErrorKind.INVALID_ID, f"malformed id {user_id!r}")
    return ObjectId(user_id)


class UserRepository:
    """
    Data access layer for User.

    Responsibilities:
      - Pure DB operations (CRUD + queries) over the injected collection
      - No FastAPI, no HTTP, no business logic

    Every method is a single round trip; store failures surface as
    ServiceError(STORE_UNAVAILABLE).
    """

    def __init__(self, collection: Collection):
        self.collection = collection

    def ensure_indexes(self) -> None:
        """Unique index on email (called once at startup)."""
        try:
            self.collection.create_index([("email", ASCENDING)], unique=True)
        except PyMongoError as exc:
            raise ServiceError(ErrorKind.STORE_UNAVAILABLE, str(exc)) from exc

    # ----- Queries -----

    def find_by_email(self, email: str) -> User | None:
        """Return a User by exact email, or None if not found."""
        try:
            doc = self.collection.find_one({"email": email})
        except PyMongoError as exc:
            raise ServiceError(ErrorKind.STORE_UNAVAILABLE, str(exc)) from exc
        return User.from_document(doc) if doc else None

    def find_by_id(self, user_id: str) -> User | None:
        """
        Return a User by id, or None if not found.

        Raises:
            ServiceError(INVALID_ID): if `user_id` is malformed.
        """
        oid = parse_object_id(user_id)
        try:
            doc = self.collection.find_one({"_id": oid})
        except PyMongoError as exc:
            raise ServiceError(ErrorKind.STORE_UNAVAILABLE, str(exc)) from exc
        return User.from_document(doc) if doc else None

    # ----- Writes -----

    def insert(self, user: User) -> str:
        """
        Insert a new User and return its id.

        A duplicate email rejected by the unique index is reported as
        EMAIL_EXISTS, the same error the service's pre-check raises.
        """
        try:
            result = self.collection.insert_one(user.to_document())
        except DuplicateKeyError as exc:
            raise ServiceError(ErrorKind.EMAIL_EXISTS, str(exc)) from exc
        except PyMongoError as exc:
            raise ServiceError(ErrorKind.STORE_UNAVAILABLE, str(exc)) from exc
        user.id = str(result.inserted_id)
        return user.id

    def update(self, user: User) -> None:
        """Overwrite the mutable fields (email, name, updated_at) only."""
        oid = parse_object_id(user.id or "")
        try:
            self.collection.update_one(
                {"_id": oid},
                {
                    "$set": {
                        "email": user.email,
                        "name": user.name,
                        "updated_at": user.updated_at,
                    }
                },
            )
        except DuplicateKeyError as exc:
            raise ServiceError(ErrorKind.EMAIL_EXISTS, str(exc)) from exc
        except PyMongoError as exc:
            raise ServiceError(ErrorKind.STORE_UNAVAILABLE, str(exc)) from exc

    def delete(self, user_id: str) -> None:
        oid = parse_object_id(user_id)
        try:
            self.collection.delete_one({"_id": oid})
        except PyMongoError as exc:
            raise ServiceError(ErrorKind.STORE_UNAVAILABLE, str(exc)) from exc
