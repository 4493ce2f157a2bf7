"""
Rating Schemas - Pydantic models for rating request/response validation
"""

from pydantic import Field, field_validator
from datetime import datetime
from typing import List, Optional

from app.schemas.base import CamelModel
from app.schemas.movie import MovieSummary
from app.schemas.validation import SafeStringMixin


class RatingCreate(CamelModel, SafeStringMixin):
    """Schema for creating/updating a rating"""
    rating: float = Field(..., description="Rating value (1-10)", ge=1.0, le=10.0)
    review: Optional[str] = Field(None, max_length=5000)

    @field_validator('review')
    @classmethod
    def clean_review(cls, v):
        v = cls.validate_no_script(v)
        return cls.sanitize_html(v)


class RatingResponse(CamelModel):
    """Schema for rating response (matches database model)"""
    id: str
    user_id: str
    movie_id: int
    rating: float
    review: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class RatingAuthor(CamelModel):
    username: str
    first_name: str
    last_name: str


class RatingWithUser(RatingResponse):
    user: RatingAuthor


class RatingWithMovie(RatingResponse):
    movie: MovieSummary


class MovieRatingsPage(CamelModel):
    results: List[RatingWithUser]
    page: int
    limit: int
    total: int
    average_rating: Optional[float] = None
    total_ratings: int


class UserRatingsPage(CamelModel):
    results: List[RatingWithMovie]
    page: int
    limit: int
    total: int
