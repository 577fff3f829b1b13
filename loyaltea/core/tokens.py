# loyaltea/core/tokens.py
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import jwt
from jose.exceptions import JOSEError

from loyaltea.core.errors import ErrorKind, ServiceError


@dataclass(frozen=True)
class TokenClaims:
    """Verified identity carried by a bearer token."""

    user_id: str
    email: str
    expires_at: datetime


class TokenIssuer:
    """
    Signs and verifies bearer tokens (JWT).

    Claims:
      - sub:   user id (hex ObjectId)
      - email: user email at issue time
      - iat / exp: issue and expiry timestamps (UTC)

    The signing key is process-wide configuration, passed in once at startup.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(hours=24),
    ):
        self.secret = secret
        self.algorithm = algorithm
        self.ttl = ttl

    def issue(self, subject_id: str, subject_email: str) -> str:
        """
        Create a signed token binding `subject_id` and `subject_email`.

        Raises:
            ServiceError(TOKEN_SIGNING_FAILED): if the token cannot be signed.
        """
        now = datetime.now(timezone.utc)
        claims: dict[str, Any] = {
            "sub": subject_id,
            "email": subject_email,
            "iat": int(now.timestamp()),
            "exp": int((now + self.ttl).timestamp()),
        }
        try:
            return jwt.encode(claims, self.secret, algorithm=self.algorithm)
        except JOSEError as exc:
            raise ServiceError(ErrorKind.TOKEN_SIGNING_FAILED, str(exc)) from exc

    def verify(self, token: str) -> TokenClaims:
        """
        Decode and verify a token.

        Verification:
          - signature (configured algorithm and secret)
          - expiration time (exp)
          - presence of sub/email claims

        Raises:
            ServiceError(INVALID_TOKEN): on any verification failure.
        """
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JOSEError as exc:
            raise ServiceError(ErrorKind.INVALID_TOKEN, str(exc)) from exc

        sub = payload.get("sub")
        email = payload.get("email")
        if not sub or not email or "exp" not in payload:
            raise ServiceError(ErrorKind.INVALID_TOKEN, "token missing sub/email/exp")

        return TokenClaims(
            user_id=sub,
            email=email,
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
