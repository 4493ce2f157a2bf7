import logging
from typing import Dict

from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.schemas.auth import UserRegister
from app.utils.exceptions import InvalidCredentialsError, UserNotFoundError
from app.utils.security import (
    hash_password,
    verify_password,
    dummy_verify,
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
)

logger = logging.getLogger(__name__)


class AuthService:
    """Registration, login and refresh-token rotation"""

    def __init__(self, user_repository: UserRepository):
        self.user_repository = user_repository

    def register_user(self, user_data: UserRegister) -> User:
        """
        Create a user with a bcrypt-hashed password.

        Raises ConflictError (field "email" or "username") when either is taken.
        """
        return self.user_repository.create({
            "email": user_data.email,
            "username": user_data.username,
            "password_hash": hash_password(user_data.password),
            "first_name": user_data.first_name,
            "last_name": user_data.last_name,
        })

    def login_user(self, email: str, password: str) -> Dict:
        user = self.user_repository.find_by_email_with_password(email)

        if user is None:
            # Burn a hash comparison so unknown emails take as long as bad passwords
            dummy_verify()
            logger.warning(f"Login failed for email {email}")
            raise InvalidCredentialsError()

        if not verify_password(password, user.password_hash):
            logger.warning(f"Login failed for email {email}")
            raise InvalidCredentialsError()

        return {"user": user, **self.issue_tokens(user)}

    def refresh_tokens(self, refresh_token: str) -> Dict[str, str]:
        """
        Exchange a refresh token for a new access/refresh pair.

        The submitted token is not revoked: it stays redeemable until it
        expires on its own.
        """
        payload = decode_refresh_token(refresh_token)

        user = self.user_repository.find_by_id(payload["user_id"])
        if user is None:
            raise UserNotFoundError()

        return self.issue_tokens(user)

    @staticmethod
    def issue_tokens(user: User) -> Dict[str, str]:
        return {
            "access_token": create_access_token(user.id, user.email),
            "refresh_token": create_refresh_token(user.id),
        }
