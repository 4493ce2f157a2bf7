from sqlalchemy import Column, Integer, String, Float, Text, DateTime
from app.database import Base, utcnow


class Movie(Base):
    """
    Local copy of a TMDB movie, keyed by the TMDB id itself.
    Rows are inserted the first time a movie is resolved and never updated.
    """
    __tablename__ = "movies"

    id = Column(Integer, primary_key=True, autoincrement=False)  # TMDB movie ID
    title = Column(String(500), nullable=False)
    overview = Column(Text)
    release_date = Column(String(20))
    poster_path = Column(String(200))
    vote_average = Column(Float)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    def __repr__(self):
        return f"<Movie(id={self.id}, title='{self.title}')>"
