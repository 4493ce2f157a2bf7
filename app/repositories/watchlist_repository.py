from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.models.watchlist import Watchlist
from app.repositories.base_repository import BaseRepository
from app.utils.exceptions import DuplicateEntryError


class WatchlistRepository(BaseRepository[Watchlist]):

    def __init__(self, db: Session):
        super().__init__(Watchlist, db)

    def find_by_user_and_movie(self, user_id: str, movie_id: int) -> Optional[Watchlist]:
        return self.filter_one_by(user_id=user_id, movie_id=movie_id)

    def add(self, user_id: str, movie_id: int) -> Watchlist:
        """
        Insert the (user, movie) row.

        The unique constraint is the authoritative duplicate check: a
        concurrent insert that slipped past the caller's pre-check surfaces
        here as DuplicateEntryError.
        """
        try:
            return self.create({"user_id": user_id, "movie_id": movie_id})
        except IntegrityError as exc:
            if self.find_by_user_and_movie(user_id, movie_id) is not None:
                raise DuplicateEntryError() from exc
            raise

    def list_by_user(self, user_id: str, page: int, limit: int) -> Tuple[List[Watchlist], int]:
        query = (
            self.db.query(Watchlist)
            .options(joinedload(Watchlist.movie))
            .filter(Watchlist.user_id == user_id)
            .order_by(Watchlist.added_at.desc(), Watchlist.id)
        )
        return self.paginate(query, page, limit)

    def remove(self, user_id: str, movie_id: int) -> int:
        deleted = (
            self.db.query(Watchlist)
            .filter(Watchlist.user_id == user_id, Watchlist.movie_id == movie_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted
