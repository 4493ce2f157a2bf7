from pydantic import EmailStr, Field, field_validator
from datetime import datetime
from typing import Optional
import re

from app.schemas.base import CamelModel
from app.utils.security import BCRYPT_MAX_BYTES

SYMBOLS = "@$!%*#?&"


def ensure_password_strength(password: str) -> str:
    """Validate password complexity requirements."""
    if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise ValueError(f'Password cannot be longer than {BCRYPT_MAX_BYTES} bytes')
    if not re.search(r'[A-Za-z]', password):
        raise ValueError('Password must contain letter, number and special character')
    if not re.search(r'[0-9]', password):
        raise ValueError('Password must contain letter, number and special character')
    if not re.search(f'[{re.escape(SYMBOLS)}]', password):
        raise ValueError('Password must contain letter, number and special character')
    return password


# Schema for user registration
class UserRegister(CamelModel):
    email: EmailStr
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=8)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)

    # Password validation
    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        return ensure_password_strength(v)


# Schema for user login
class UserLogin(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshRequest(CamelModel):
    refresh_token: str = Field(..., min_length=1)


# Schema for user response (no credential field)
class UserResponse(CamelModel):
    id: str
    email: str
    username: str
    first_name: str
    last_name: str
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class TokenPair(CamelModel):
    access_token: str
    refresh_token: str


class AuthResponse(TokenPair):
    user: UserResponse
