from fastapi import APIRouter, Depends, Query, Path

from app.schemas.movie import MovieDetails, MovieListResponse
from app.services.movie_service import MovieService
from app.utils.dependencies import get_movie_service
from app.utils.exceptions import reword_upstream_errors

router = APIRouter(prefix="/api/movies", tags=["Movies"])


# ============================================
# Search & Popular
# ============================================

@router.get("/search", response_model=MovieListResponse)
def search_movies(
    q: str = Query(..., min_length=1, max_length=200, description="Search query"),
    page: int = Query(1, ge=1, description="Page number"),
    movie_service: MovieService = Depends(get_movie_service)
):
    """Text search for movies; results are cached locally"""
    with reword_upstream_errors("Movie search failed"):
        return movie_service.search_movies(q, page)


@router.get("/popular", response_model=MovieListResponse)
def get_popular(
    page: int = Query(1, ge=1, description="Page number"),
    movie_service: MovieService = Depends(get_movie_service)
):
    """Get popular movies"""
    with reword_upstream_errors("Failed to retrieve popular movies"):
        return movie_service.get_popular(page)


# ============================================
# Movie Details (dynamic routes last)
# ============================================

@router.get("/{movie_id}", response_model=MovieDetails)
def get_movie_details(
    movie_id: int = Path(..., gt=0, description="TMDB movie ID"),
    movie_service: MovieService = Depends(get_movie_service)
):
    """Get movie details by ID"""
    with reword_upstream_errors("Failed to retrieve movie details"):
        return movie_service.get_movie(movie_id)


@router.get("/{movie_id}/similar", response_model=MovieListResponse)
def get_similar_movies(
    movie_id: int = Path(..., gt=0, description="TMDB movie ID"),
    page: int = Query(1, ge=1, description="Page number"),
    movie_service: MovieService = Depends(get_movie_service)
):
    """Get movies similar to the given one"""
    with reword_upstream_errors("Failed to retrieve similar movies"):
        return movie_service.get_similar(movie_id, page)
