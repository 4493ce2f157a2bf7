from app.models.movie import Movie
from app.models.watchlist import Watchlist
from app.repositories.watchlist_repository import WatchlistRepository
from app.utils.exceptions import UpstreamError, UpstreamRateLimitError, UpstreamAuthError


def test_add_to_watchlist_caches_movie(client, db_session, alice, tmdb):
    response = client.post("/api/users/watchlist", json={"movieId": 550}, headers=alice["headers"])

    assert response.status_code == 201
    body = response.json()
    assert body["movieId"] == 550
    assert body["userId"] == alice["id"]
    assert body["id"] and body["addedAt"]

    cached = db_session.get(Movie, 550)
    assert cached is not None
    assert cached.title == "Fight Club"
    assert tmdb.calls["details"] == 1


def test_duplicate_add_is_rejected_before_upstream_call(client, alice, tmdb):
    client.post("/api/users/watchlist", json={"movieId": 550}, headers=alice["headers"])
    tmdb.error = UpstreamError("boom")

    response = client.post("/api/users/watchlist", json={"movieId": 550}, headers=alice["headers"])

    assert response.status_code == 409
    assert response.json()["detail"] == "Movie is already in watchlist"
    assert tmdb.calls["details"] == 1


def test_add_unknown_movie(client, db_session, alice):
    response = client.post("/api/users/watchlist", json={"movieId": 999999}, headers=alice["headers"])

    assert response.status_code == 404
    assert response.json()["detail"] == "Movie not found"
    assert db_session.query(Watchlist).count() == 0
    assert db_session.get(Movie, 999999) is None


def test_add_with_invalid_movie_id(client, alice):
    response = client.post("/api/users/watchlist", json={"movieId": 0}, headers=alice["headers"])
    assert response.status_code == 400

    response = client.post("/api/users/watchlist", json={}, headers=alice["headers"])
    assert response.status_code == 400


def test_add_requires_auth(client):
    response = client.post("/api/users/watchlist", json={"movieId": 550})
    assert response.status_code == 401


def test_upstream_failures_map_to_status(client, db_session, alice, tmdb):
    tmdb.error = UpstreamRateLimitError()
    response = client.post("/api/users/watchlist", json={"movieId": 550}, headers=alice["headers"])
    assert response.status_code == 429

    tmdb.error = UpstreamAuthError()
    response = client.post("/api/users/watchlist", json={"movieId": 550}, headers=alice["headers"])
    assert response.status_code == 503

    tmdb.error = UpstreamError("TMDB API error (502): Bad Gateway", upstream_status=502)
    response = client.post("/api/users/watchlist", json={"movieId": 550}, headers=alice["headers"])
    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to verify movie"

    assert db_session.query(Watchlist).count() == 0


def test_get_watchlist_newest_first_with_movie_fields(client, alice):
    for movie_id in (550, 680, 13):
        client.post("/api/users/watchlist", json={"movieId": movie_id}, headers=alice["headers"])

    response = client.get("/api/users/watchlist", headers=alice["headers"])

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 3
    assert body["page"] == 1
    assert body["limit"] == 20
    assert [m["id"] for m in body["results"]] == [13, 680, 550]
    first = body["results"][0]
    assert first["title"] == "Forrest Gump"
    assert first["posterPath"] == "/poster13.jpg"
    assert "addedAt" in first


def test_get_watchlist_pagination(client, alice):
    for movie_id in (550, 680, 13):
        client.post("/api/users/watchlist", json={"movieId": movie_id}, headers=alice["headers"])

    response = client.get("/api/users/watchlist?page=2&limit=2", headers=alice["headers"])

    body = response.json()
    assert body["total"] == 3
    assert [m["id"] for m in body["results"]] == [550]


def test_get_watchlist_rejects_bad_pagination(client, alice):
    assert client.get("/api/users/watchlist?page=0", headers=alice["headers"]).status_code == 400
    assert client.get("/api/users/watchlist?limit=101", headers=alice["headers"]).status_code == 400


def test_watchlists_are_per_user(client, alice, bob):
    client.post("/api/users/watchlist", json={"movieId": 550}, headers=alice["headers"])

    response = client.get("/api/users/watchlist", headers=bob["headers"])
    assert response.json()["total"] == 0

    # Bob can add the same movie independently
    response = client.post("/api/users/watchlist", json={"movieId": 550}, headers=bob["headers"])
    assert response.status_code == 201


def test_remove_from_watchlist(client, db_session, alice):
    client.post("/api/users/watchlist", json={"movieId": 550}, headers=alice["headers"])

    response = client.delete("/api/users/watchlist/550", headers=alice["headers"])

    assert response.status_code == 204
    assert db_session.query(Watchlist).count() == 0
    # Cached movie survives removal
    assert db_session.get(Movie, 550) is not None


def test_remove_missing_entry(client, alice):
    response = client.delete("/api/users/watchlist/550", headers=alice["headers"])

    assert response.status_code == 404
    assert response.json()["detail"] == "Movie not found in watchlist"


def test_cannot_remove_another_users_entry(client, db_session, alice, bob):
    client.post("/api/users/watchlist", json={"movieId": 550}, headers=alice["headers"])

    response = client.delete("/api/users/watchlist/550", headers=bob["headers"])

    assert response.status_code == 404
    assert db_session.query(Watchlist).count() == 1


def test_concurrent_duplicate_hits_unique_constraint(client, db_session, alice, tmdb, monkeypatch):
    client.post("/api/users/watchlist", json={"movieId": 550}, headers=alice["headers"])

    # The second request's existence check misses the row, as if both ran at once
    original = WatchlistRepository.find_by_user_and_movie
    calls = []

    def stale_check(self, user_id, movie_id):
        calls.append(movie_id)
        if len(calls) == 1:
            return None
        return original(self, user_id, movie_id)

    monkeypatch.setattr(WatchlistRepository, "find_by_user_and_movie", stale_check)

    response = client.post("/api/users/watchlist", json={"movieId": 550}, headers=alice["headers"])

    assert response.status_code == 409
    assert response.json()["detail"] == "Movie is already in watchlist"
    assert tmdb.calls["details"] == 2
    assert db_session.query(Watchlist).count() == 1
