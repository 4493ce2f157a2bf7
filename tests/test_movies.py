import logging

from sqlalchemy.exc import OperationalError

from app.models.movie import Movie
from app.repositories.movie_repository import MovieRepository
from app.utils.exceptions import UpstreamError, UpstreamRateLimitError


def test_search_reshapes_and_caches(client, db_session):
    response = client.get("/api/movies/search?q=fight")

    assert response.status_code == 200
    body = response.json()
    assert body["totalResults"] == 1
    assert body["results"][0]["title"] == "Fight Club"
    assert body["results"][0]["voteAverage"] == 7.5
    assert db_session.get(Movie, 550) is not None


def test_search_requires_query(client):
    assert client.get("/api/movies/search").status_code == 400


def test_search_failure_message(client, tmdb):
    tmdb.error = UpstreamError("TMDB API network error: Timeout")
    response = client.get("/api/movies/search?q=fight")

    assert response.status_code == 500
    assert response.json()["detail"] == "Movie search failed"


def test_popular_rate_limited(client, tmdb):
    tmdb.error = UpstreamRateLimitError()
    response = client.get("/api/movies/popular")

    assert response.status_code == 429
    assert response.json()["detail"] == "Rate limit exceeded. Please try again later."


def test_movie_details(client, db_session, tmdb):
    tmdb.add(603, "The Matrix", runtime=136, genres=[{"id": 28, "name": "Action"}])

    response = client.get("/api/movies/603")

    assert response.status_code == 200
    body = response.json()
    assert body["runtime"] == 136
    assert body["genres"] == [{"id": 28, "name": "Action"}]
    assert db_session.get(Movie, 603).title == "The Matrix"


def test_movie_details_not_found(client):
    response = client.get("/api/movies/1234567")

    assert response.status_code == 404
    assert response.json()["detail"] == "Movie not found"


def test_similar_movies(client):
    body = client.get("/api/movies/550/similar").json()
    assert 550 not in [m["id"] for m in body["results"]]
    assert len(body["results"]) == 2


def test_cache_row_is_not_duplicated(client, db_session, alice):
    client.get("/api/movies/search?q=fight")
    client.post("/api/users/watchlist", json={"movieId": 550}, headers=alice["headers"])
    client.get("/api/movies/550")

    assert db_session.query(Movie).filter(Movie.id == 550).count() == 1


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_failed_cache_write_is_logged_not_raised(client, db_session, monkeypatch, caplog):
    db_session.add(Movie(id=550, title="Fight Club"))
    db_session.commit()

    # Miss the cache once so the insert runs against the existing row
    original = MovieRepository.find_by_id
    calls = []

    def stale_lookup(self, movie_id):
        calls.append(movie_id)
        if len(calls) == 1:
            return None
        return original(self, movie_id)

    monkeypatch.setattr(MovieRepository, "find_by_id", stale_lookup)

    with caplog.at_level(logging.WARNING, logger="app.services.movie_service"):
        response = client.get("/api/movies/search?q=fight")

    assert response.status_code == 200
    assert response.json()["results"][0]["id"] == 550
    assert "Failed to cache movie 550" in caplog.text
    assert db_session.query(Movie).filter(Movie.id == 550).count() == 1


def test_failed_cache_write_does_not_block_watchlist_add(client, db_session, alice, monkeypatch):
    db_session.add(Movie(id=680, title="Pulp Fiction"))
    db_session.commit()

    def failing_insert(self, tmdb_movie):
        raise OperationalError("INSERT", {}, Exception("database is locked"))

    original = MovieRepository.find_by_id
    calls = []

    def stale_lookup(self, movie_id):
        calls.append(movie_id)
        if len(calls) <= 2:
            return None
        return original(self, movie_id)

    monkeypatch.setattr(MovieRepository, "create_from_tmdb", failing_insert)
    monkeypatch.setattr(MovieRepository, "find_by_id", stale_lookup)

    response = client.post("/api/users/watchlist", json={"movieId": 680}, headers=alice["headers"])

    assert response.status_code == 201
