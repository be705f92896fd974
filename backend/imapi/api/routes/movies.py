"""
Movie routes backed by TMDb and local review statistics.
"""
from fastapi import APIRouter, Depends
from typing import List, Optional
from imapi.core.security import TokenClaims
from imapi.schemas.movie import MovieAggregate, MoviePage
from imapi.schemas.review import MovieReviewResponse
from imapi.services.rating_aggregator import RatingAggregator
from imapi.services.review_store import ReviewStore
from imapi.api.dependencies import get_optional_claims, get_rating_aggregator, get_review_store

router = APIRouter(prefix="/movies", tags=["movies"])


# Fixed paths must come before "/{tmdb_movie_id}"
@router.get("/popular", response_model=MoviePage)
def get_popular(aggregator: RatingAggregator = Depends(get_rating_aggregator)):
    """Get popular movies."""
    return aggregator.get_popular()


@router.get("/search", response_model=MoviePage)
def search_movies(
    query: Optional[str] = None,
    aggregator: RatingAggregator = Depends(get_rating_aggregator)
):
    """Search movies by title; without a query, popular movies are returned."""
    return aggregator.search_movies(query)


@router.get("/{tmdb_movie_id}", response_model=MovieAggregate)
def get_movie(
    tmdb_movie_id: str,
    aggregator: RatingAggregator = Depends(get_rating_aggregator)
):
    """Get movie details with review count and average rating."""
    return aggregator.get_movie_aggregate(tmdb_movie_id)


@router.get("/{tmdb_movie_id}/reviews", response_model=List[MovieReviewResponse])
def list_movie_reviews(
    tmdb_movie_id: str,
    claims: Optional[TokenClaims] = Depends(get_optional_claims),
    reviews: ReviewStore = Depends(get_review_store)
):
    """Get reviews for a movie, most recent first."""
    caller_id = claims.user_id if claims else None
    return reviews.list_by_movie(tmdb_movie_id, caller_id)
