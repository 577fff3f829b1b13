# loyaltea/core/auth.py
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from loyaltea.core.errors import ErrorKind, ServiceError
from loyaltea.core.tokens import TokenClaims, TokenIssuer

# HTTP Bearer scheme:
# - auto_error=False => a missing Authorization header does not raise
#   FastAPI's own 403; we answer with our INVALID_TOKEN (401) instead.
bearer_scheme = HTTPBearer(auto_error=False)


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def require_auth(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> TokenClaims:
    """
    Enforce authentication.

    Returns:
        The verified token claims.

    Raises:
        ServiceError(INVALID_TOKEN): missing, malformed or expired token.
    """
    if credentials is None:
        raise ServiceError(ErrorKind.INVALID_TOKEN, "missing bearer token")
    return tokens.verify(credentials.credentials)
