"""
Movie source adapter: the contract the aggregator consumes and its TMDb client.
"""
from typing import Any, Optional, Protocol
from urllib.parse import quote
import httpx
import logging
from pydantic import BaseModel
from imapi.core.config import settings
from imapi.core.errors import UpstreamError
from imapi.schemas.movie import TmdbMovieDetails, TmdbMoviePage

logger = logging.getLogger(__name__)


class MovieSource(Protocol):
    """Canonical movie metadata provider."""

    def get_movie(self, movie_id: str) -> TmdbMovieDetails:
        ...

    def get_popular_movies(self) -> TmdbMoviePage:
        ...

    def search_movies(self, query: str) -> TmdbMoviePage:
        ...


class TmdbClient:
    """
    TMDb v3 client over httpx.

    Every failure (network, timeout, non-2xx status, malformed JSON, payload
    of the wrong shape) is raised as UpstreamError. There are no retries and
    nothing is cached.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = (base_url or settings.TMDB_BASE_URL).rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {token if token is not None else settings.TMDB_TOKEN}",
            },
            timeout=timeout if timeout is not None else settings.TMDB_TIMEOUT,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "TmdbClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _get(self, path: str, model: type, **params: Any) -> BaseModel:
        try:
            response = self._client.get(path, params=params or None)
            response.raise_for_status()
            return model.model_validate(response.json())
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error from TMDb for {path}: {e.response.status_code}")
            raise UpstreamError(f"Tmdb client error: HTTP {e.response.status_code}")
        except httpx.HTTPError as e:
            # Network errors, timeouts
            logger.error(f"Network error from TMDb for {path}: {e}")
            raise UpstreamError(f"Tmdb client error: {e}")
        except ValueError as e:
            # Invalid JSON or a payload that does not match the model
            logger.error(f"Malformed TMDb payload for {path}: {e}")
            raise UpstreamError("Tmdb client error: malformed response")

    def get_movie(self, movie_id: str) -> TmdbMovieDetails:
        return self._get(f"/movie/{quote(str(movie_id), safe='')}", TmdbMovieDetails)

    def get_popular_movies(self) -> TmdbMoviePage:
        return self._get("/movie/popular", TmdbMoviePage)

    def search_movies(self, query: str) -> TmdbMoviePage:
        return self._get("/search/movie", TmdbMoviePage, query=query)
