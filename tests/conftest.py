import os

# Cheap hashes and a throwaway database for the whole test session
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET", "test-access-secret")
os.environ.setdefault("JWT_REFRESH_SECRET", "test-refresh-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db, enable_sqlite_foreign_keys, init_db
from app.main import app
from app.utils.dependencies import get_tmdb_service
from app.utils.exceptions import UpstreamNotFoundError

SQLALCHEMY_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(engine)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

DEFAULT_PASSWORD = "Secret123!"


def make_movie(movie_id, title=None, **extra):
    movie = {
        "id": movie_id,
        "title": title or f"Movie {movie_id}",
        "overview": f"Overview of movie {movie_id}",
        "release_date": "2020-01-01",
        "poster_path": f"/poster{movie_id}.jpg",
        "vote_average": 7.5,
    }
    movie.update(extra)
    return movie


class FakeTMDB:
    """In-memory stand-in for TMDBService with call counters and injectable failures"""

    api_key = "test-key"

    def __init__(self):
        self.movies = {}
        self.calls = {"details": 0, "search": 0, "popular": 0, "similar": 0}
        # Raised by the next calls to any endpoint while set
        self.error = None

    def add(self, movie_id, title=None, **extra):
        self.movies[movie_id] = make_movie(movie_id, title, **extra)
        return self.movies[movie_id]

    def _check_error(self):
        if self.error is not None:
            raise self.error

    @staticmethod
    def _page(results, page=1):
        return {"page": page, "results": results, "total_pages": 1, "total_results": len(results)}

    def get_movie_details(self, movie_id):
        self.calls["details"] += 1
        self._check_error()
        if movie_id not in self.movies:
            raise UpstreamNotFoundError(upstream_status=404)
        return dict(self.movies[movie_id])

    def search_movies(self, query, page=1):
        self.calls["search"] += 1
        self._check_error()
        hits = [m for m in self.movies.values() if query.lower() in m["title"].lower()]
        return self._page(hits, page)

    def get_popular(self, page=1):
        self.calls["popular"] += 1
        self._check_error()
        return self._page(list(self.movies.values()), page)

    def get_similar(self, movie_id, page=1):
        self.calls["similar"] += 1
        self._check_error()
        if movie_id not in self.movies:
            raise UpstreamNotFoundError(upstream_status=404)
        return self._page([m for m in self.movies.values() if m["id"] != movie_id], page)

    def close(self):
        pass


@pytest.fixture
def db_session():
    """Provide a clean database session for each test."""
    Base.metadata.drop_all(bind=engine)
    init_db(engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def tmdb():
    fake = FakeTMDB()
    fake.add(550, "Fight Club")
    fake.add(680, "Pulp Fiction")
    fake.add(13, "Forrest Gump")
    return fake


@pytest.fixture
def client(db_session, tmdb):
    """FastAPI test client with the database and TMDB dependencies overridden."""

    def override_get_db():
        test_db = TestingSessionLocal()
        try:
            yield test_db
        finally:
            test_db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_tmdb_service] = lambda: tmdb

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.pop(get_db, None)
    app.dependency_overrides.pop(get_tmdb_service, None)


def register(client, email="alice@example.com", username="alice", password=DEFAULT_PASSWORD,
             first_name="Alice", last_name="Smith"):
    return client.post("/api/auth/register", json={
        "email": email,
        "username": username,
        "password": password,
        "firstName": first_name,
        "lastName": last_name,
    })


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def alice(client):
    """Registered user: response body plus ready-to-use headers"""
    body = register(client).json()
    return {"body": body, "headers": auth_headers(body["accessToken"]), "id": body["user"]["id"]}


@pytest.fixture
def bob(client):
    body = register(client, email="bob@example.com", username="bob", first_name="Bob", last_name="Jones").json()
    return {"body": body, "headers": auth_headers(body["accessToken"]), "id": body["user"]["id"]}
