from typing import Any, Dict

from app.models.watchlist import Watchlist
from app.repositories.watchlist_repository import WatchlistRepository
from app.schemas.validation import DEFAULT_LIMIT, DEFAULT_PAGE, validate_movie_id, validate_pagination
from app.services.movie_service import MovieService
from app.utils.exceptions import DuplicateEntryError, NotFoundError


class WatchlistService:
    """Service for watchlist operations. Every lookup is scoped to the requesting user."""

    def __init__(self, watchlist_repository: WatchlistRepository, movie_service: MovieService):
        self.watchlist_repository = watchlist_repository
        self.movie_service = movie_service

    def add_to_watchlist(self, user_id: str, movie_id: int) -> Watchlist:
        """
        Add a movie to user's watchlist

        - Rejects duplicates before any TMDB call
        - Verifies the movie exists in TMDB and caches it locally
        """
        validate_movie_id(movie_id)

        if self.watchlist_repository.find_by_user_and_movie(user_id, movie_id) is not None:
            raise DuplicateEntryError()

        self.movie_service.resolve_and_cache(movie_id)

        # A concurrent add that passed the check above still hits the unique constraint
        return self.watchlist_repository.add(user_id, movie_id)

    def get_watchlist(self, user_id: str, page: int = DEFAULT_PAGE, limit: int = DEFAULT_LIMIT) -> Dict[str, Any]:
        """Get user's watchlist, most recently added first"""
        validate_pagination(page, limit)
        items, total = self.watchlist_repository.list_by_user(user_id, page, limit)

        results = [
            {
                "id": item.movie.id,
                "title": item.movie.title,
                "overview": item.movie.overview,
                "poster_path": item.movie.poster_path,
                "vote_average": item.movie.vote_average,
                "release_date": item.movie.release_date,
                "added_at": item.added_at,
            }
            for item in items
        ]

        return {"results": results, "page": page, "limit": limit, "total": total}

    def remove_from_watchlist(self, user_id: str, movie_id: int) -> None:
        """Remove a movie from watchlist; another user's entry counts as missing"""
        validate_movie_id(movie_id)

        if self.watchlist_repository.find_by_user_and_movie(user_id, movie_id) is None:
            raise NotFoundError("Movie not found in watchlist")

        self.watchlist_repository.remove(user_id, movie_id)
