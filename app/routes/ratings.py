"""
Rating Routes - API endpoints for movie rating system
"""

from fastapi import APIRouter, Depends, status, Query, Path, Response

from app.models.user import User
from app.schemas.rating import (
    RatingCreate,
    RatingResponse,
    MovieRatingsPage,
    UserRatingsPage,
)
from app.services.rating_service import RatingService
from app.utils.dependencies import get_current_user, get_rating_service
from app.utils.exceptions import reword_upstream_errors

router = APIRouter(prefix="/api/movies", tags=["Ratings"])
user_ratings_router = APIRouter(prefix="/api/users/ratings", tags=["Ratings"])


# ==================== RATING CRUD ENDPOINTS ====================

@router.post("/{movie_id}/ratings", response_model=RatingResponse, status_code=status.HTTP_200_OK)
def upsert_rating(
    rating_data: RatingCreate,
    response: Response,
    movie_id: int = Path(..., gt=0, description="TMDB movie ID"),
    current_user: User = Depends(get_current_user),
    rating_service: RatingService = Depends(get_rating_service)
):
    """
    Add a new rating or update existing one for a movie

    - **rating**: Rating value from 1 to 10 (required)
    - **review**: free text (optional)

    Responds 201 when the rating is new and 200 when it replaced an earlier one.
    """
    with reword_upstream_errors("Failed to verify movie"):
        rating, created = rating_service.upsert_rating(
            current_user.id, movie_id, rating_data.rating, rating_data.review
        )
    if created:
        response.status_code = status.HTTP_201_CREATED
    return rating


@router.get("/{movie_id}/ratings", response_model=MovieRatingsPage)
def get_movie_ratings(
    movie_id: int = Path(..., gt=0, description="TMDB movie ID"),
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
    rating_service: RatingService = Depends(get_rating_service)
):
    """
    Get all ratings for a movie (public)

    averageRating and totalRatings cover every rating, not only this page.
    """
    return rating_service.get_ratings_by_movie(movie_id, page, limit)


@router.delete("/{movie_id}/ratings", status_code=status.HTTP_204_NO_CONTENT)
def delete_rating(
    movie_id: int = Path(..., gt=0, description="TMDB movie ID"),
    current_user: User = Depends(get_current_user),
    rating_service: RatingService = Depends(get_rating_service)
):
    """Delete current user's rating for a movie"""
    rating_service.delete_rating(current_user.id, movie_id)
    return None


@user_ratings_router.get("", response_model=UserRatingsPage)
def get_my_ratings(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
    current_user: User = Depends(get_current_user),
    rating_service: RatingService = Depends(get_rating_service)
):
    """Get all ratings by current user, newest first"""
    return rating_service.get_ratings_by_user(current_user.id, page, limit)
