# loyaltea/routers/users.py
from fastapi import APIRouter, Depends, Request, status

from loyaltea.core.auth import require_auth
from loyaltea.core.tokens import TokenClaims
from loyaltea.schemas.user import (
    AuthResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    UserRead,
    UserResponse,
    UserUpdateRequest,
)
from loyaltea.services.user_service import UserService

router = APIRouter(prefix="/user", tags=["Users"])


def get_user_service(request: Request) -> UserService:
    """Service built once in create_app() and kept on app.state."""
    return request.app.state.user_service


# -------- Authentication --------


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
def register(
    payload: RegisterRequest,
    service: UserService = Depends(get_user_service),
):
    """
    Create an account.

    Errors:
      - 400: invalid email / short password / empty name
      - 409: email already registered
    """
    result = service.register(payload.email, payload.password, payload.name)
    return AuthResponse(
        message="User registered successfully",
        user=UserRead.from_user(result.user),
        token=result.token,
    )


@router.post("/login", response_model=AuthResponse)
def login(
    payload: LoginRequest,
    service: UserService = Depends(get_user_service),
):
    """
    Exchange email + password for a bearer token.

    Unknown email and wrong password both answer 401 with the same body.
    """
    result = service.login(payload.email, payload.password)
    return AuthResponse(
        message="Login successful",
        user=UserRead.from_user(result.user),
        token=result.token,
    )


@router.get("/me", response_model=UserResponse)
def read_me(
    claims: TokenClaims = Depends(require_auth),
    service: UserService = Depends(get_user_service),
):
    """
    Return the authenticated user's profile.

    Auth:
      - Requires a valid bearer token.
    """
    return UserResponse(user=UserRead.from_user(service.get_current(claims)))


# -------- CRUD by id --------


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
):
    return UserResponse(user=UserRead.from_user(service.get_by_id(user_id)))


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: str,
    payload: UserUpdateRequest,
    service: UserService = Depends(get_user_service),
):
    """
    Replace a user's email and name.

    Errors:
      - 400: malformed id / invalid new email / empty name
      - 404: user not found
      - 409: new email belongs to another account
    """
    user = service.update(user_id, payload.email, payload.name)
    return UserResponse(
        message="User updated successfully",
        user=UserRead.from_user(user),
    )


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
):
    service.delete(user_id)
    return MessageResponse(message="User deleted successfully")
