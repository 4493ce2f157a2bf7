from pydantic import Field
from typing import List, Optional

from app.schemas.base import CamelModel


class MovieSummary(CamelModel):
    """Movie fields shared by search results, cache rows and nested payloads"""
    id: int
    title: str
    overview: Optional[str] = None
    release_date: Optional[str] = None
    poster_path: Optional[str] = None
    vote_average: Optional[float] = None


class Genre(CamelModel):
    id: int
    name: str


class MovieDetails(MovieSummary):
    backdrop_path: Optional[str] = None
    vote_count: Optional[int] = None
    runtime: Optional[int] = None
    tagline: Optional[str] = None
    genres: List[Genre] = Field(default_factory=list)


class MovieListResponse(CamelModel):
    page: int
    results: List[MovieSummary]
    total_pages: int
    total_results: int
