# loyaltea/services/user_service.py
from dataclasses import dataclass

from loyaltea.core.errors import ErrorKind, ServiceError
from loyaltea.core.security import hash_password, verify_password
from loyaltea.core.tokens import TokenClaims, TokenIssuer
from loyaltea.core.validators import MIN_PASSWORD_LENGTH, is_valid_email
from loyaltea.models.user import User, utcnow
from loyaltea.repositories.user_repo import UserRepository


@dataclass
class AuthResult:
    user: User
    token: str


class UserService:
    """
    Business logic for User.

    Responsibilities:
      - enforce account rules (email format, password length, unique email)
      - hash passwords and issue bearer tokens
      - orchestrate repository operations

    Failures are raised as ServiceError; mapping to HTTP happens at the
    boundary.

    Email uniqueness is a check-then-write: two concurrent requests for the
    same address can both pass the check. The unique index on `email` makes
    the losing write fail with the same EMAIL_EXISTS error.
    Emails are compared exactly (case-sensitive, no normalization).
    """

    def __init__(self, repo: UserRepository, tokens: TokenIssuer):
        self.repo = repo
        self.tokens = tokens

    # ----- Helpers -----

    def _require_name(self, name: str) -> str:
        name = (name or "").strip()
        if not name:
            raise ServiceError(ErrorKind.INVALID_NAME)
        return name

    def _ensure_email_available(self, email: str) -> None:
        if self.repo.find_by_email(email) is not None:
            raise ServiceError(ErrorKind.EMAIL_EXISTS)

    def _get_existing(self, user_id: str) -> User:
        user = self.repo.find_by_id(user_id)
        if user is None:
            raise ServiceError(ErrorKind.NOT_FOUND)
        return user

    # ----- Authentication -----

    def register(self, email: str, password: str, name: str) -> AuthResult:
        """
        Create an account and issue a token for it.

        Steps:
          1. Validate email format, password length, name.
          2. Reject an email that is already registered.
          3. Hash the password, set timestamps, insert.
          4. Issue a bearer token for the new id/email; if signing fails,
             the inserted account is removed again.
        """
        if not is_valid_email(email):
            raise ServiceError(ErrorKind.INVALID_EMAIL)
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise ServiceError(ErrorKind.INVALID_PASSWORD)
        name = self._require_name(name)

        self._ensure_email_available(email)

        now = utcnow()
        user = User(
            email=email,
            password=hash_password(password),
            name=name,
            created_at=now,
            updated_at=now,
        )
        self.repo.insert(user)

        try:
            token = self.tokens.issue(user.id, user.email)
        except ServiceError:
            # No account without a token: a retry must not hit EMAIL_EXISTS
            self.repo.delete(user.id)
            raise
        return AuthResult(user=user, token=token)

    def login(self, email: str, password: str) -> AuthResult:
        """
        Check credentials and issue a token.

        Unknown email and wrong password raise the same INVALID_CREDENTIALS
        so callers cannot probe which accounts exist.
        """
        user = self.repo.find_by_email(email)
        if user is None or not verify_password(user.password, password):
            raise ServiceError(ErrorKind.INVALID_CREDENTIALS)

        token = self.tokens.issue(user.id, user.email)
        return AuthResult(user=user, token=token)

    def get_current(self, claims: TokenClaims) -> User:
        """Resolve the account behind a verified token."""
        return self._get_existing(claims.user_id)

    # ----- CRUD -----

    def get_by_id(self, user_id: str) -> User:
        """
        Raises:
            ServiceError(INVALID_ID): malformed id.
            ServiceError(NOT_FOUND): no such user.
        """
        return self._get_existing(user_id)

    def update(self, user_id: str, email: str, name: str) -> User:
        """
        Replace email and name.

        Email is re-validated (format + uniqueness) only when it changes;
        a name-only update never touches email rules.
        """
        user = self._get_existing(user_id)
        name = self._require_name(name)

        if email != user.email:
            if not is_valid_email(email):
                raise ServiceError(ErrorKind.INVALID_EMAIL)
            self._ensure_email_available(email)

        user.email = email
        user.name = name
        user.updated_at = utcnow()
        self.repo.update(user)
        return user

    def delete(self, user_id: str) -> None:
        self._get_existing(user_id)
        self.repo.delete(user_id)
