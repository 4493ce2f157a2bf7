"""
Rating Service - Handle all rating-related business logic
Follows the same pattern as WatchlistService for consistency
"""

from typing import Any, Dict, Optional, Tuple

from app.models.rating import Rating
from app.repositories.rating_repository import RatingRepository
from app.schemas.validation import DEFAULT_LIMIT, DEFAULT_PAGE, validate_movie_id, validate_pagination
from app.services.movie_service import MovieService
from app.utils.exceptions import NotFoundError, ValidationFailed

MIN_RATING = 1
MAX_RATING = 10


class RatingService:
    """Service for movie rating operations"""

    def __init__(self, rating_repository: RatingRepository, movie_service: MovieService):
        self.rating_repository = rating_repository
        self.movie_service = movie_service

    def upsert_rating(
        self,
        user_id: str,
        movie_id: int,
        rating: float,
        review: Optional[str] = None
    ) -> Tuple[Rating, bool]:
        """
        Create or update the user's rating for a movie

        Returns:
            (rating row, True if the row was created by this call)

        Raises:
            ValidationFailed: rating outside 1-10
            MovieNotFoundError: TMDB does not know the movie
        """
        validate_movie_id(movie_id)
        if rating < MIN_RATING or rating > MAX_RATING:
            raise ValidationFailed(f"Rating must be between {MIN_RATING} and {MAX_RATING}")

        self.movie_service.resolve_and_cache(movie_id)

        # Only decides 201 vs 200; the upsert itself is what keeps one row per pair
        is_new = self.rating_repository.find_by_user_and_movie(user_id, movie_id) is None

        saved = self.rating_repository.upsert(user_id, movie_id, rating, review or None)
        return saved, is_new

    def get_ratings_by_movie(self, movie_id: int, page: int = DEFAULT_PAGE, limit: int = DEFAULT_LIMIT) -> Dict[str, Any]:
        """
        Get all ratings for a movie, newest first

        average_rating and total_ratings cover every rating of the movie,
        not only the returned page.
        """
        validate_movie_id(movie_id)
        validate_pagination(page, limit)

        results, total = self.rating_repository.list_by_movie(movie_id, page, limit)
        average, count = self.rating_repository.aggregate_by_movie(movie_id)

        return {
            "results": results,
            "page": page,
            "limit": limit,
            "total": total,
            "average_rating": average,
            "total_ratings": count,
        }

    def get_ratings_by_user(self, user_id: str, page: int = DEFAULT_PAGE, limit: int = DEFAULT_LIMIT) -> Dict[str, Any]:
        validate_pagination(page, limit)
        results, total = self.rating_repository.list_by_user(user_id, page, limit)
        return {"results": results, "page": page, "limit": limit, "total": total}

    def delete_rating(self, user_id: str, movie_id: int) -> None:
        """Delete the user's rating for a movie; other users' ratings count as missing"""
        validate_movie_id(movie_id)

        if self.rating_repository.find_by_user_and_movie(user_id, movie_id) is None:
            raise NotFoundError("Rating not found")

        self.rating_repository.delete(user_id, movie_id)
