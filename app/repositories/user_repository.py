import re
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, defer

from app.models.user import User
from app.models.watchlist import Watchlist
from app.models.rating import Rating
from app.repositories.base_repository import BaseRepository
from app.utils.exceptions import ConflictError

# Only display fields may change through the profile workflow
PROFILE_FIELDS = ("first_name", "last_name", "bio", "avatar_url")

_CONFLICT_PATTERNS = (
    re.compile(r"Key \((email|username)\)="),  # postgresql DETAIL line
    re.compile(r"\busers\.(email|username)\b"),  # sqlite
    re.compile(r"\bix_users_(email|username)\b"),  # index name
)


def _conflicting_field(exc: IntegrityError) -> Optional[str]:
    """
    Name the unique column behind an IntegrityError, if recognisable.

    Only the column or constraint name is inspected, never the offending value.
    """
    constraint = getattr(getattr(exc.orig, "diag", None), "constraint_name", None)
    if constraint:
        match = _CONFLICT_PATTERNS[2].search(constraint)
        if match:
            return match.group(1)

    message = str(exc.orig)
    for pattern in _CONFLICT_PATTERNS:
        match = pattern.search(message)
        if match:
            return match.group(1)
    return None


class UserRepository(BaseRepository[User]):
    """Credential store. Public lookups never load the password hash."""

    def __init__(self, db: Session):
        super().__init__(User, db)

    def _public_query(self):
        return self.db.query(User).options(defer(User.password_hash))

    def create(self, obj_in: Dict[str, Any]) -> User:
        try:
            return super().create(obj_in)
        except IntegrityError as exc:
            raise ConflictError(field=_conflicting_field(exc)) from exc

    def find_by_id(self, user_id: str) -> Optional[User]:
        return self._public_query().filter(User.id == user_id).first()

    def find_by_email_with_password(self, email: str) -> Optional[User]:
        """Authentication lookup; the only path that reads the password hash"""
        return self.db.query(User).filter(User.email == email).first()

    def get_statistics(self, user_id: str) -> Dict[str, int]:
        return {
            "watchlist_count": self.db.query(Watchlist).filter(Watchlist.user_id == user_id).count(),
            "ratings_count": self.db.query(Rating).filter(Rating.user_id == user_id).count(),
        }

    def update_profile(self, user: User, data: Dict[str, Any]) -> User:
        for field, value in data.items():
            if field in PROFILE_FIELDS:
                setattr(user, field, value)
        self.db.commit()
        self.db.refresh(user)
        return user
