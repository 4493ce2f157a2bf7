"""
Request-scoped wiring: repositories and services are built per request on
top of the request's database session. The TMDB client is created once in
the application lifespan and read from app.state.
"""
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User
from app.repositories.movie_repository import MovieRepository
from app.repositories.rating_repository import RatingRepository
from app.repositories.user_repository import UserRepository
from app.repositories.watchlist_repository import WatchlistRepository
from app.services.auth_service import AuthService
from app.services.movie_service import MovieService
from app.services.rating_service import RatingService
from app.services.tmdb_service import TMDBService
from app.services.user_service import UserService
from app.services.watchlist_service import WatchlistService
from app.utils.exceptions import (
    AuthenticationRequiredError,
    InvalidAuthFormatError,
    UnauthorizedError,
)
from app.utils.security import decode_access_token


def get_tmdb_service(request: Request) -> TMDBService:
    return request.app.state.tmdb_service


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


def get_auth_service(users: UserRepository = Depends(get_user_repository)) -> AuthService:
    return AuthService(users)


def get_user_service(users: UserRepository = Depends(get_user_repository)) -> UserService:
    return UserService(users)


def get_movie_service(
    db: Session = Depends(get_db),
    tmdb: TMDBService = Depends(get_tmdb_service)
) -> MovieService:
    return MovieService(tmdb, MovieRepository(db))


def get_watchlist_service(
    db: Session = Depends(get_db),
    movie_service: MovieService = Depends(get_movie_service)
) -> WatchlistService:
    return WatchlistService(WatchlistRepository(db), movie_service)


def get_rating_service(
    db: Session = Depends(get_db),
    movie_service: MovieService = Depends(get_movie_service)
) -> RatingService:
    return RatingService(RatingRepository(db), movie_service)


# Dependency to get the current authenticated user
def get_current_user(
    request: Request,
    users: UserRepository = Depends(get_user_repository)
) -> User:
    """
    Resolve the bearer token to a user that still exists.

    Each failure has its own message: missing header, wrong scheme, bad
    signature, expired token, deleted user.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise AuthenticationRequiredError()

    scheme, _, token = auth_header.partition(" ")
    if scheme != "Bearer":
        raise InvalidAuthFormatError()

    token = token.strip()
    if not token:
        raise AuthenticationRequiredError()

    payload = decode_access_token(token)

    # Re-check the store so a deleted account stops working immediately
    user = users.find_by_id(payload["user_id"])
    if user is None:
        raise UnauthorizedError("User not found")

    return user
