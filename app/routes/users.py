from fastapi import APIRouter, Depends

from app.models.user import User
from app.schemas.auth import UserResponse
from app.schemas.user import ProfileUpdate, UserProfile
from app.services.user_service import UserService
from app.utils.dependencies import get_current_user, get_user_service

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("/profile", response_model=UserProfile)
def get_profile(
    current_user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
):
    """Get current user's profile with watchlist and rating counts"""
    return user_service.get_profile(current_user.id)


@router.put("/profile", response_model=UserResponse)
def update_profile(
    update_data: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
):
    """
    Update current user's profile

    - **firstName**, **lastName**: non-empty when given
    - **bio**: up to 500 characters, null clears it
    - **avatarUrl**: valid URL, null clears it

    Email, username and password cannot be changed here.
    """
    return user_service.update_profile(current_user.id, update_data)
