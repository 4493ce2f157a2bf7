from pydantic import Field, HttpUrl, TypeAdapter, ValidationError, field_validator
from typing import Optional

from app.schemas.auth import UserResponse
from app.schemas.base import CamelModel
from app.schemas.validation import SafeStringMixin

_URL_ADAPTER = TypeAdapter(HttpUrl)


class UserStatistics(CamelModel):
    watchlist_count: int
    ratings_count: int


class UserProfile(UserResponse):
    statistics: UserStatistics


class ProfileUpdate(CamelModel, SafeStringMixin):
    """
    Display fields only. email, username and password are not accepted here
    and are silently dropped if sent.
    """
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    bio: Optional[str] = Field(None, max_length=500)
    avatar_url: Optional[str] = Field(None, max_length=500)

    @field_validator('first_name', 'last_name')
    @classmethod
    def names_not_null(cls, v):
        if v is None:
            raise ValueError('Name cannot be null')
        return v

    @field_validator('bio')
    @classmethod
    def clean_bio(cls, v):
        v = cls.validate_no_script(v)
        return cls.sanitize_html(v)

    @field_validator('avatar_url')
    @classmethod
    def valid_avatar_url(cls, v):
        # Validate as a URL but store exactly what the client sent
        if v is None:
            return v
        try:
            _URL_ADAPTER.validate_python(v)
        except ValidationError:
            raise ValueError('Avatar URL must be a valid http(s) URL')
        return v

    def to_update_dict(self) -> dict:
        return self.model_dump(exclude_unset=True)
