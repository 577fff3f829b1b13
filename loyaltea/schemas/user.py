# loyaltea/schemas/user.py
from sqlmodel import SQLModel

from loyaltea.models.user import User


class RegisterRequest(SQLModel):
    """
    Payload for POST /user/register.

    Fields are only type-checked here. Email format, password length and
    non-empty name are business rules enforced by UserService so that each
    failure has its own error kind.
    """

    email: str
    password: str
    name: str


class LoginRequest(SQLModel):
    email: str
    password: str


class UserUpdateRequest(SQLModel):
    """Full replacement of the mutable profile fields."""

    email: str
    name: str


class UserRead(SQLModel):
    """Response schema returned to clients. Never includes the password."""

    id: str
    email: str
    name: str

    @classmethod
    def from_user(cls, user: User) -> "UserRead":
        return cls(id=user.id or "", email=user.email, name=user.name)


class UserResponse(SQLModel):
    message: str | None = None
    user: UserRead


class AuthResponse(SQLModel):
    message: str
    user: UserRead
    token: str


class MessageResponse(SQLModel):
    message: str
