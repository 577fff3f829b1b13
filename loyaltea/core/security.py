# loyaltea/core/security.py
"""Password hashing and verification (Argon2id)."""

from argon2 import PasswordHasher
from argon2 import exceptions as argon_exc

from loyaltea.core.errors import ErrorKind, ServiceError

# Library defaults: Argon2id, salted per hash. Not configurable.
_ph = PasswordHasher()


def hash_password(password: str) -> str:
    """
    Return a salted one-way digest of `password`.

    Raises:
        ServiceError(HASHING_FAILED): if the hasher fails internally
        (e.g. memory allocation).
    """
    try:
        return _ph.hash(password)
    except argon_exc.HashingError as exc:
        raise ServiceError(ErrorKind.HASHING_FAILED, str(exc)) from exc


def verify_password(digest: str | None, password: str) -> bool:
    """Check `password` against a stored digest. Never raises."""
    if not digest:
        return False
    try:
        return _ph.verify(digest, password)
    except (argon_exc.VerificationError, argon_exc.InvalidHashError):
        return False
