from fastapi import APIRouter, Depends, status

from app.schemas.auth import (
    UserRegister,
    UserLogin,
    RefreshRequest,
    AuthResponse,
    TokenPair,
)
from app.services.auth_service import AuthService
from app.utils.dependencies import get_auth_service
from app.utils.exceptions import UnauthorizedError, UserNotFoundError

# Define router
router = APIRouter(prefix="/api/auth", tags=["Authentication"])


# Register a new user
@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(user_data: UserRegister, auth_service: AuthService = Depends(get_auth_service)):
    """
    Register a new user and log them in

    - **409**: email or username already exists (message says which)
    """
    user = auth_service.register_user(user_data)
    return {"user": user, **auth_service.issue_tokens(user)}


# Login endpoint
@router.post("/login", response_model=AuthResponse)
def login(credentials: UserLogin, auth_service: AuthService = Depends(get_auth_service)):
    """Login with email and password"""
    return auth_service.login_user(credentials.email, credentials.password)


@router.post("/refresh", response_model=TokenPair)
def refresh(payload: RefreshRequest, auth_service: AuthService = Depends(get_auth_service)):
    """
    Exchange a refresh token for a new access token and a new refresh token

    Clients must replace their stored refresh token with the returned one.
    """
    try:
        return auth_service.refresh_tokens(payload.refresh_token)
    except UserNotFoundError:
        raise UnauthorizedError("User not found")
