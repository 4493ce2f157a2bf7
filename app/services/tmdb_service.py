import requests
import os
from typing import Dict, Optional
import logging

from app.utils.exceptions import (
    UpstreamAuthError,
    UpstreamError,
    UpstreamNotFoundError,
    UpstreamRateLimitError,
)

logger = logging.getLogger(__name__)


# TMDB Service to interact with The Movie Database API
class TMDBService:
    """
    Thin client over the TMDB v3 API.

    Every failure is raised as an UpstreamError subclass so callers can tell
    auth problems (401), missing resources (404) and rate limiting (429)
    apart from everything else. Timeouts and connection errors count as
    generic upstream failures. Nothing is retried.
    """
    BASE_URL = "https://api.themoviedb.org/3"
    DEFAULT_TIMEOUT = 10

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"accept": "application/json"})

    @classmethod
    def from_env(cls) -> "TMDBService":
        return cls(
            api_key=os.getenv("TMDB_API_KEY"),
            base_url=os.getenv("TMDB_BASE_URL", cls.BASE_URL),
            timeout=float(os.getenv("TMDB_TIMEOUT", cls.DEFAULT_TIMEOUT)),
        )

    def close(self) -> None:
        self.session.close()

    # Internal method to make GET requests to TMDB API
    def _make_request(self, endpoint: str, params: Dict = None) -> Dict:
        """
        Make HTTP request to TMDB API.

        Args:
            endpoint: API endpoint (e.g., "/movie/popular")
            params: Query parameters

        Returns:
            JSON response from TMDB
        """
        if not self.api_key:
            logger.error("TMDB API key not configured")
            raise UpstreamAuthError()

        params = dict(params or {})
        params['api_key'] = self.api_key
        url = f"{self.base_url}/{endpoint.lstrip('/')}"

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"TMDB API network error for {endpoint}: {type(e).__name__}")
            raise UpstreamError(f"TMDB API network error: {type(e).__name__}") from e

        if not response.ok:
            self._raise_for_status(endpoint, response)

        logger.debug(f"TMDB API request successful: {endpoint}")
        return response.json()

    @staticmethod
    def _raise_for_status(endpoint: str, response: requests.Response) -> None:
        try:
            message = response.json().get("status_message") or response.reason
        except ValueError:
            message = response.reason or "Unknown API error"

        status_code = response.status_code
        logger.error(f"TMDB API error for {endpoint}: {status_code} {message}")

        if status_code == 401:
            raise UpstreamAuthError(upstream_status=401)
        if status_code == 404:
            raise UpstreamNotFoundError("Not found", upstream_status=404)
        if status_code == 429:
            raise UpstreamRateLimitError(upstream_status=429)
        raise UpstreamError(f"TMDB API error ({status_code}): {message}", upstream_status=status_code)

    # Public methods to access various TMDB endpoints
    def search_movies(self, query: str, page: int = 1) -> Dict:
        """Search movies by title."""
        return self._make_request("/search/movie", {'query': query, 'page': page})

    def get_movie_details(self, movie_id: int) -> Dict:
        """Get detailed movie information."""
        return self._make_request(f"/movie/{movie_id}")

    def get_popular(self, page: int = 1) -> Dict:
        return self._make_request("/movie/popular", {'page': page})

    def get_similar(self, movie_id: int, page: int = 1) -> Dict:
        return self._make_request(f"/movie/{movie_id}/similar", {'page': page})
