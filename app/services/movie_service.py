import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

from app.models.movie import Movie
from app.repositories.movie_repository import MovieRepository
from app.schemas.validation import validate_movie_id
from app.services.tmdb_service import TMDBService
from app.utils.exceptions import MovieNotFoundError, UpstreamNotFoundError

logger = logging.getLogger(__name__)


def to_summary(tmdb_movie: Dict[str, Any]) -> Dict[str, Any]:
    """Reshape a TMDB movie payload to the fields the API exposes"""
    return {
        "id": tmdb_movie["id"],
        "title": tmdb_movie.get("title") or "",
        "overview": tmdb_movie.get("overview"),
        "release_date": tmdb_movie.get("release_date"),
        "poster_path": tmdb_movie.get("poster_path"),
        "vote_average": tmdb_movie.get("vote_average"),
    }


def to_list_response(tmdb_page: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "page": tmdb_page.get("page", 1),
        "results": [to_summary(m) for m in tmdb_page.get("results", [])],
        "total_pages": tmdb_page.get("total_pages", 0),
        "total_results": tmdb_page.get("total_results", 0),
    }


class MovieService:
    """
    Movie lookups backed by TMDB, with a cache-aside copy in the movies table.

    Cache writes are best effort: a failed insert (typically another request
    inserting the same movie first) is logged and never fails the caller.
    """

    def __init__(self, tmdb_service: TMDBService, movie_repository: MovieRepository):
        self.tmdb = tmdb_service
        self.movie_repository = movie_repository

    def _fetch_details(self, movie_id: int) -> Dict[str, Any]:
        try:
            return self.tmdb.get_movie_details(movie_id)
        except UpstreamNotFoundError:
            raise MovieNotFoundError()

    def cache_movie(self, tmdb_movie: Dict[str, Any]) -> Optional[Movie]:
        """Insert the movie if absent; return whatever row exists afterwards"""
        existing = self.movie_repository.find_by_id(tmdb_movie["id"])
        if existing is not None:
            return existing

        try:
            return self.movie_repository.create_from_tmdb(tmdb_movie)
        except SQLAlchemyError as e:
            logger.warning(f"Failed to cache movie {tmdb_movie.get('id')}: {type(e).__name__}")
            return self.movie_repository.find_by_id(tmdb_movie["id"])

    def resolve_and_cache(self, movie_id: int) -> Optional[Movie]:
        """
        Confirm the movie exists upstream and make sure it is cached locally.

        Raises MovieNotFoundError when TMDB does not know the id; other
        upstream failures propagate unchanged. No local state changes unless
        the upstream lookup succeeds.
        """
        validate_movie_id(movie_id)
        cached = self.movie_repository.find_by_id(movie_id)
        tmdb_movie = self._fetch_details(movie_id)

        if cached is not None:
            return cached
        return self.cache_movie(tmdb_movie)

    def search_movies(self, query: str, page: int = 1) -> Dict[str, Any]:
        tmdb_page = self.tmdb.search_movies(query, page)
        for tmdb_movie in tmdb_page.get("results", []):
            self.cache_movie(tmdb_movie)
        return to_list_response(tmdb_page)

    def get_popular(self, page: int = 1) -> Dict[str, Any]:
        return to_list_response(self.tmdb.get_popular(page))

    def get_movie(self, movie_id: int) -> Dict[str, Any]:
        validate_movie_id(movie_id)
        tmdb_movie = self._fetch_details(movie_id)
        self.cache_movie(tmdb_movie)

        details = to_summary(tmdb_movie)
        details.update({
            "backdrop_path": tmdb_movie.get("backdrop_path"),
            "vote_count": tmdb_movie.get("vote_count"),
            "runtime": tmdb_movie.get("runtime"),
            "tagline": tmdb_movie.get("tagline"),
            "genres": tmdb_movie.get("genres") or [],
        })
        return details

    def get_similar(self, movie_id: int, page: int = 1) -> Dict[str, Any]:
        validate_movie_id(movie_id)
        try:
            return to_list_response(self.tmdb.get_similar(movie_id, page))
        except UpstreamNotFoundError:
            raise MovieNotFoundError()
