from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from app.models.movie import Movie
from app.repositories.base_repository import BaseRepository


class MovieRepository(BaseRepository[Movie]):
    """Local movie cache keyed by TMDB id"""

    def __init__(self, db: Session):
        super().__init__(Movie, db)

    def find_by_id(self, movie_id: int) -> Optional[Movie]:
        return self.get(movie_id)

    def create_from_tmdb(self, tmdb_movie: Dict[str, Any]) -> Movie:
        """Insert a cache row built from a TMDB movie payload"""
        return self.create({
            "id": tmdb_movie["id"],
            "title": tmdb_movie.get("title") or "Unknown",
            "overview": tmdb_movie.get("overview"),
            "release_date": tmdb_movie.get("release_date") or None,
            "poster_path": tmdb_movie.get("poster_path"),
            "vote_average": tmdb_movie.get("vote_average"),
        })
