import httpx
import mongomock
import pytest
from fastapi.testclient import TestClient

from loyaltea.core.config import Settings
from loyaltea.core.mailing_list import MailchimpSubscriber
from loyaltea.core.tokens import TokenIssuer
from loyaltea.database import OFFERS_COLLECTION, USERS_COLLECTION
from loyaltea.main import create_app
from loyaltea.repositories.offer_repo import OfferRepository
from loyaltea.repositories.user_repo import UserRepository
from loyaltea.services.user_service import UserService

JWT_SECRET = "tests-secret-key"


def make_settings(**overrides) -> Settings:
    values = {
        "DATABASE_URL": "mongodb://localhost:27017",
        "DBNAME": "loyaltea-tests",
        "JWT_SECRET": JWT_SECRET,
        "MAILCHIMP_API_KEY": None,
        "MAILCHIMP_LIST_ID": None,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_subscriber(handler) -> MailchimpSubscriber:
    """Mailchimp client whose HTTP calls are answered by `handler`."""
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return MailchimpSubscriber("0123456789abcdef-us21", "list123", client=client)


@pytest.fixture
def database():
    return mongomock.MongoClient()["loyaltea-tests"]


@pytest.fixture
def users_collection(database):
    return database[USERS_COLLECTION]


@pytest.fixture
def offers_collection(database):
    return database[OFFERS_COLLECTION]


@pytest.fixture
def token_issuer():
    return TokenIssuer(JWT_SECRET)


@pytest.fixture
def user_repo(users_collection):
    repo = UserRepository(users_collection)
    repo.ensure_indexes()
    return repo


@pytest.fixture
def offer_repo(offers_collection):
    return OfferRepository(offers_collection)


@pytest.fixture
def user_service(user_repo, token_issuer):
    return UserService(user_repo, token_issuer)


@pytest.fixture
def client(database):
    app = create_app(settings=make_settings(), database=database)
    with TestClient(app) as test_client:
        yield test_client
