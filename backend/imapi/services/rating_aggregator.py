"""
Rating aggregator: external movie metadata merged with local review statistics.
"""
from typing import Callable, Optional, TypeVar
import logging
from imapi.core.config import settings
from imapi.core.errors import UpstreamError
from imapi.schemas.movie import (
    MovieAggregate, MoviePage, MoviePageResult, TmdbMovieDetails, TmdbMoviePage
)
from imapi.services.movie_source import MovieSource
from imapi.services.review_store import ReviewStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

POSTER_SIZE = "w780"
BACKDROP_SIZE = "original"
LIST_POSTER_SIZE = "w500"


class RatingAggregator:
    """Combines MovieSource data with ReviewStore statistics."""

    def __init__(
        self,
        reviews: ReviewStore,
        movie_source: MovieSource,
        image_base_url: Optional[str] = None
    ):
        self.reviews = reviews
        self.movie_source = movie_source
        self.image_base_url = (image_base_url or settings.TMDB_IMAGE_BASE_URL).rstrip("/")

    def _fetch(self, call: Callable[[], T]) -> T:
        """Run an adapter call; any failure becomes one UpstreamError."""
        try:
            return call()
        except UpstreamError:
            raise
        except Exception as e:
            logger.error(f"Movie source failure: {e}", exc_info=True)
            raise UpstreamError(f"Tmdb client error: {e}")

    def _image_url(self, size: str, path: Optional[str]) -> Optional[str]:
        if not path:
            return None
        return f"{self.image_base_url}/{size}{path}"

    def get_movie_aggregate(self, tmdb_movie_id: str) -> MovieAggregate:
        """Movie details with review_count and average_rating."""
        movie: TmdbMovieDetails = self._fetch(lambda: self.movie_source.get_movie(tmdb_movie_id))
        stats = self.reviews.get_movie_stats(tmdb_movie_id)

        return MovieAggregate(
            id=movie.id,
            title=movie.title,
            overview=movie.overview,
            release_date=movie.release_date,
            runtime=movie.runtime,
            genres=[genre.name for genre in movie.genres],
            poster_path=self._image_url(POSTER_SIZE, movie.poster_path),
            backdrop_path=self._image_url(BACKDROP_SIZE, movie.backdrop_path),
            average_rating=stats.average_rating,
            review_count=stats.review_count
        )

    def get_popular(self) -> MoviePage:
        page = self._fetch(self.movie_source.get_popular_movies)
        return self._map_page(page)

    def search_movies(self, query: Optional[str]) -> MoviePage:
        """Search by title; a blank query returns the popular listing."""
        if not query or not query.strip():
            return self.get_popular()
        page = self._fetch(lambda: self.movie_source.search_movies(query.strip()))
        return self._map_page(page)

    def _map_page(self, page: TmdbMoviePage) -> MoviePage:
        return MoviePage(
            page=page.page,
            results=[
                MoviePageResult(
                    id=movie.id,
                    title=movie.title,
                    release_date=movie.release_date,
                    poster_path=self._image_url(LIST_POSTER_SIZE, movie.poster_path)
                )
                for movie in page.results
            ],
            total_pages=page.total_pages,
            total_results=page.total_results
        )
