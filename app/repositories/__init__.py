from app.repositories.base_repository import BaseRepository
from app.repositories.user_repository import UserRepository
from app.repositories.movie_repository import MovieRepository
from app.repositories.watchlist_repository import WatchlistRepository
from app.repositories.rating_repository import RatingRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "MovieRepository",
    "WatchlistRepository",
    "RatingRepository",
]
