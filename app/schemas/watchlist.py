from pydantic import Field
from datetime import datetime
from typing import List

from app.schemas.base import CamelModel
from app.schemas.movie import MovieSummary


class WatchlistAdd(CamelModel):
    """Schema for adding a movie to watchlist"""
    movie_id: int = Field(..., gt=0, description="TMDB movie ID")


class WatchlistResponse(CamelModel):
    """Schema for a newly created watchlist entry"""
    id: str
    user_id: str
    movie_id: int
    added_at: datetime


class WatchlistMovie(MovieSummary):
    """Watchlist entry flattened onto the cached movie"""
    added_at: datetime


class WatchlistPage(CamelModel):
    results: List[WatchlistMovie]
    page: int
    limit: int
    total: int
