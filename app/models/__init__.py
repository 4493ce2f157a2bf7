"""
Import all models to ensure they are registered with SQLAlchemy
"""
from app.models.user import User
from app.models.movie import Movie
from app.models.rating import Rating
from app.models.watchlist import Watchlist

__all__ = [
    "User",
    "Movie",
    "Rating",
    "Watchlist",
]
