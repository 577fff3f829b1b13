# loyaltea/main.py
from contextlib import asynccontextmanager
from datetime import timedelta
import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from pymongo.database import Database

from loyaltea.core.config import Settings, get_settings
from loyaltea.core.errors import (
    ServiceError,
    request_validation_handler,
    service_error_handler,
)
from loyaltea.core.mailing_list import MailchimpSubscriber, build_subscriber
from loyaltea.core.tokens import TokenIssuer
from loyaltea.database import (
    OFFERS_COLLECTION,
    USERS_COLLECTION,
    create_client,
    get_database,
)
from loyaltea.repositories.offer_repo import OfferRepository
from loyaltea.repositories.user_repo import UserRepository
from loyaltea.services.offer_decoders import get_decoder
from loyaltea.services.offer_service import OfferService
from loyaltea.services.user_service import UserService

# Routers
from loyaltea.routers.offers import router as offers_router
from loyaltea.routers.users import router as users_router

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn")


def _wire_services(
    app: FastAPI,
    database: Database,
    settings: Settings,
    subscriber: MailchimpSubscriber | None,
) -> None:
    """
    Build repositories and services over explicit collection handles.

    Everything request handlers need lives on app.state; nothing is looked
    up through module globals.
    """
    user_repo = UserRepository(database[USERS_COLLECTION])
    user_repo.ensure_indexes()
    offer_repo = OfferRepository(database[OFFERS_COLLECTION])

    token_issuer = TokenIssuer(
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALG,
        ttl=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )

    app.state.token_issuer = token_issuer
    app.state.user_service = UserService(user_repo, token_issuer)
    app.state.offer_decoder = get_decoder(settings.OFFER_PROVIDER)
    app.state.offer_service = OfferService(offer_repo, subscriber)


def create_app(
    settings: Settings | None = None,
    database: Database | None = None,
    subscriber: MailchimpSubscriber | None = None,
) -> FastAPI:
    """
    Application factory.

    Args:
        settings: explicit settings; read from the environment when omitted.
        database: an already-connected database (tests pass an in-memory
            one). When omitted, the lifespan connects using DATABASE_URL.
        subscriber: mailing-list client; built from settings when omitted.

    Run with:
        uvicorn loyaltea.main:create_app --factory
    """
    settings = settings or get_settings()
    if subscriber is None:
        subscriber = build_subscriber(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan handler.

        Startup:
          - Connect to MongoDB (unless a database was injected), ping it,
            and build services.

        Shutdown:
          - Close the Mongo client and the mailing-list HTTP client.
        """
        client = None
        if database is None:
            logger.info("🔄 Startup: Connecting to MongoDB...")
            try:
                client = create_client(settings)
                _wire_services(app, get_database(client, settings), settings, subscriber)
                logger.info("✅ Startup: DB connection OK, indexes verified.")
            except Exception as e:
                logger.error(f"❌ Startup: DB connection FAILED: {e}")
                if client is not None:
                    client.close()
                raise
        yield
        if client is not None:
            client.close()
            logger.info("Shutdown: MongoDB connection closed.")
        if subscriber is not None:
            subscriber.close()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="0.1.0",
        lifespan=lifespan,
    )

    if database is not None:
        _wire_services(app, database, settings, subscriber)

    if settings.CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.include_router(users_router)
    app.include_router(offers_router)

    @app.get("/ping")
    def ping():
        """Liveness probe."""
        return {"message": "pong"}

    return app


if __name__ == "__main__":
    import os

    import uvicorn

    uvicorn.run(
        "loyaltea.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=int(os.getenv("PORT", 8080)),
    )
