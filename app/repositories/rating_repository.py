import uuid
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.database import utcnow
from app.models.rating import Rating
from app.models.user import User
from app.repositories.base_repository import BaseRepository

# Dialects with a native INSERT .. ON CONFLICT DO UPDATE
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class RatingRepository(BaseRepository[Rating]):

    def __init__(self, db: Session):
        super().__init__(Rating, db)

    def find_by_user_and_movie(self, user_id: str, movie_id: int) -> Optional[Rating]:
        return self.filter_one_by(user_id=user_id, movie_id=movie_id)

    def upsert(self, user_id: str, movie_id: int, rating: float, review: Optional[str] = None) -> Rating:
        """
        Insert the rating or overwrite rating/review of the existing row.

        Keyed on the (user_id, movie_id) unique constraint, so concurrent
        upserts for the same pair always end with a single row.
        """
        now = utcnow()
        insert = _UPSERT_INSERTS.get(self.db.get_bind().dialect.name)

        if insert is None:
            self._upsert_fallback(user_id, movie_id, rating, review, now)
        else:
            stmt = insert(Rating).values(
                id=str(uuid.uuid4()),
                user_id=user_id,
                movie_id=movie_id,
                rating=rating,
                review=review,
                created_at=now,
                updated_at=now,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=[Rating.user_id, Rating.movie_id],
                set_={
                    "rating": stmt.excluded.rating,
                    "review": stmt.excluded.review,
                    "updated_at": stmt.excluded.updated_at,
                },
            )
            self.db.execute(stmt)
            self.db.commit()

        return self.find_by_user_and_movie(user_id, movie_id)

    def _upsert_fallback(self, user_id, movie_id, rating, review, now) -> None:
        """Insert in a savepoint; on a unique violation update the winner's row"""
        try:
            with self.db.begin_nested():
                self.db.add(Rating(user_id=user_id, movie_id=movie_id, rating=rating,
                                   review=review, created_at=now, updated_at=now))
        except IntegrityError:
            existing = self.find_by_user_and_movie(user_id, movie_id)
            if existing is None:
                raise
            existing.rating = rating
            existing.review = review
            existing.updated_at = now
        self.db.commit()

    def list_by_movie(self, movie_id: int, page: int, limit: int) -> Tuple[List[Rating], int]:
        query = (
            self.db.query(Rating)
            .options(joinedload(Rating.user).load_only(User.username, User.first_name, User.last_name))
            .filter(Rating.movie_id == movie_id)
            .order_by(Rating.created_at.desc(), Rating.id)
        )
        return self.paginate(query, page, limit)

    def aggregate_by_movie(self, movie_id: int) -> Tuple[Optional[float], int]:
        """Mean rating and rating count over every rating of the movie"""
        average, count = (
            self.db.query(func.avg(Rating.rating), func.count(Rating.id))
            .filter(Rating.movie_id == movie_id)
            .one()
        )
        return (float(average) if average is not None else None), count

    def list_by_user(self, user_id: str, page: int, limit: int) -> Tuple[List[Rating], int]:
        query = (
            self.db.query(Rating)
            .options(joinedload(Rating.movie))
            .filter(Rating.user_id == user_id)
            .order_by(Rating.created_at.desc(), Rating.id)
        )
        return self.paginate(query, page, limit)

    def delete(self, user_id: str, movie_id: int) -> int:
        deleted = (
            self.db.query(Rating)
            .filter(Rating.user_id == user_id, Rating.movie_id == movie_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted
