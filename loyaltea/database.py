# loyaltea/database.py
from pymongo import MongoClient
from pymongo.database import Database

from loyaltea.core.config import Settings

# ---------------------------------------------------------
# MongoDB connection
#
# - timeoutMS=5000               : every operation is bounded
# - serverSelectionTimeoutMS=5000: fail fast when the server is down
#
# Both budgets are fixed; requests never override them.
# No retries: a failed call surfaces immediately.
# ---------------------------------------------------------

OPERATION_TIMEOUT_MS = 5000

USERS_COLLECTION = "users"
OFFERS_COLLECTION = "offers"


def create_client(settings: Settings) -> MongoClient:
    """Create the process-wide Mongo client (thread-safe, pooled)."""
    return MongoClient(
        settings.DATABASE_URL,
        timeoutMS=OPERATION_TIMEOUT_MS,
        serverSelectionTimeoutMS=OPERATION_TIMEOUT_MS,
        retryWrites=False,
        retryReads=False,
        tz_aware=True,
    )


def get_database(client: MongoClient, settings: Settings) -> Database:
    """
    Return the application database and verify connectivity.

    This is called once on application startup; a failed ping aborts
    startup.
    """
    client.admin.command("ping")
    return client[settings.DBNAME]
