from fastapi import APIRouter, Depends, status, Query, Path

from app.models.user import User
from app.schemas.watchlist import WatchlistAdd, WatchlistResponse, WatchlistPage
from app.services.watchlist_service import WatchlistService
from app.utils.dependencies import get_current_user, get_watchlist_service
from app.utils.exceptions import reword_upstream_errors

router = APIRouter(prefix="/api/users/watchlist", tags=["Watchlist"])


@router.post("", response_model=WatchlistResponse, status_code=status.HTTP_201_CREATED)
def add_to_watchlist(
    watchlist_data: WatchlistAdd,
    current_user: User = Depends(get_current_user),
    watchlist_service: WatchlistService = Depends(get_watchlist_service)
):
    """
    Add a movie to user's watchlist

    - **movieId**: TMDB movie ID (required)
    - **409**: already in watchlist
    - **404**: movie unknown to TMDB
    """
    with reword_upstream_errors("Failed to verify movie"):
        return watchlist_service.add_to_watchlist(current_user.id, watchlist_data.movie_id)


@router.get("", response_model=WatchlistPage)
def get_watchlist(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
    current_user: User = Depends(get_current_user),
    watchlist_service: WatchlistService = Depends(get_watchlist_service)
):
    """Get user's watchlist, most recently added first"""
    return watchlist_service.get_watchlist(current_user.id, page, limit)


@router.delete("/{movie_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_from_watchlist(
    movie_id: int = Path(..., gt=0, description="TMDB movie ID"),
    current_user: User = Depends(get_current_user),
    watchlist_service: WatchlistService = Depends(get_watchlist_service)
):
    """Remove a movie from watchlist"""
    watchlist_service.remove_from_watchlist(current_user.id, movie_id)
    return None
