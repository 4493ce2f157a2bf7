from typing import Dict

from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.schemas.user import ProfileUpdate
from app.utils.exceptions import UserNotFoundError


class UserService:
    """Profile reads and display-field updates"""

    def __init__(self, user_repository: UserRepository):
        self.user_repository = user_repository

    def get_profile(self, user_id: str) -> Dict:
        user = self.user_repository.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError()

        return {
            "id": user.id,
            "email": user.email,
            "username": user.username,
            "first_name": user.first_name,
            "last_name": user.last_name,
            "bio": user.bio,
            "avatar_url": user.avatar_url,
            "created_at": user.created_at,
            "updated_at": user.updated_at,
            "statistics": self.user_repository.get_statistics(user_id),
        }

    def update_profile(self, user_id: str, data: ProfileUpdate) -> User:
        user = self.user_repository.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError()

        return self.user_repository.update_profile(user, data.to_update_dict())
