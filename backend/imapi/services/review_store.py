"""
Review store: CRUD over reviews and per-movie rating statistics.
"""
from decimal import Decimal, ROUND_HALF_UP
from sqlalchemy import and_, exists, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List, Optional, Union
import logging
from imapi.core.errors import NotFoundError, ValidationError
from imapi.models.review import Review, ReviewLike
from imapi.models.user import User
from imapi.schemas.movie import MovieRatingStats
from imapi.schemas.review import (
    ReviewCreate, ReviewUpdate, ReviewResponse, MovieReviewResponse,
    TITLE_MAX_LENGTH, REVIEW_TEXT_MIN_LENGTH, REVIEW_TEXT_MAX_LENGTH,
    RATING_MIN, RATING_MAX,
)

logger = logging.getLogger(__name__)


def validate_review_fields(title: str, review_text: str, rating: int) -> None:
    """
    Check review fields before they reach the database.

    Request schemas already enforce the same bounds; the store checks again
    because payloads can be built without validation (``model_construct``).
    """
    if not isinstance(title, str) or not 1 <= len(title) <= TITLE_MAX_LENGTH:
        raise ValidationError(f"Title must be 1-{TITLE_MAX_LENGTH} characters")
    if not isinstance(review_text, str) or not (
        REVIEW_TEXT_MIN_LENGTH <= len(review_text) <= REVIEW_TEXT_MAX_LENGTH
    ):
        raise ValidationError(
            f"Review text must be {REVIEW_TEXT_MIN_LENGTH}-{REVIEW_TEXT_MAX_LENGTH} characters"
        )
    if isinstance(rating, bool) or not isinstance(rating, int) or not RATING_MIN <= rating <= RATING_MAX:
        raise ValidationError(f"Rating must be an integer between {RATING_MIN} and {RATING_MAX}")


class ReviewStore:
    """Reads and writes reviews through one request-scoped session."""

    def __init__(self, db: Session):
        self.db = db

    def _likes_column(self):
        return (
            self.db.query(func.count(ReviewLike.review_id))
            .filter(ReviewLike.review_id == Review.id)
            .correlate(Review)
            .scalar_subquery()
            .label("likes")
        )

    def _view_query(self, *extra_columns):
        return (
            self.db.query(Review, User.username, self._likes_column(), *extra_columns)
            .join(User, User.id == Review.user_id)
        )

    @staticmethod
    def _to_view(review: Review, username: str, likes: int) -> dict:
        return {
            "id": review.id,
            "user_id": review.user_id,
            "tmdb_movie_id": review.tmdb_movie_id,
            "title": review.title,
            "review_text": review.review_text,
            "rating": review.rating,
            "created_at": review.created_at,
            "username": username,
            "likes": likes or 0,
        }

    def get_one(self, review_id: int) -> ReviewResponse:
        """Return one review or raise NotFoundError."""
        row = self._view_query().filter(Review.id == review_id).first()
        if not row:
            raise NotFoundError("Review not found")
        review, username, likes = row
        return ReviewResponse(**self._to_view(review, username, likes))

    def list_by_user(self, user_id: int) -> List[ReviewResponse]:
        """Reviews written by a user, oldest first (ascending id)."""
        rows = (
            self._view_query()
            .filter(Review.user_id == user_id)
            .order_by(Review.id.asc())
            .all()
        )
        return [ReviewResponse(**self._to_view(r, u, n)) for r, u, n in rows]

    def list_by_movie(
        self,
        tmdb_movie_id: str,
        caller_id: Optional[int] = None
    ) -> List[MovieReviewResponse]:
        """
        Reviews for a movie, most recent first (descending id).

        With a caller id each entry reports whether that caller liked it;
        without one ``liked_by_me`` stays None.
        """
        if caller_id is None:
            rows = (
                self._view_query()
                .filter(Review.tmdb_movie_id == tmdb_movie_id)
                .order_by(Review.id.desc())
                .all()
            )
            return [MovieReviewResponse(**self._to_view(r, u, n)) for r, u, n in rows]

        liked_by_me = (
            exists()
            .where(and_(ReviewLike.review_id == Review.id, ReviewLike.user_id == caller_id))
            .correlate(Review)
            .label("liked_by_me")
        )
        rows = (
            self._view_query(liked_by_me)
            .filter(Review.tmdb_movie_id == tmdb_movie_id)
            .order_by(Review.id.desc())
            .all()
        )
        return [
            MovieReviewResponse(**self._to_view(r, u, n), liked_by_me=bool(liked))
            for r, u, n, liked in rows
        ]

    def get_owner_id(self, review_id: int) -> int:
        """Return the id of the review's author or raise NotFoundError."""
        owner_id = self.db.query(Review.user_id).filter(Review.id == review_id).scalar()
        if owner_id is None:
            raise NotFoundError("Review not found")
        return owner_id

    def create(self, user_id: int, payload: ReviewCreate) -> int:
        """Insert a review and return its id."""
        validate_review_fields(payload.title, payload.review_text, payload.rating)
        if not payload.tmdb_movie_id:
            raise ValidationError("Movie id is required")

        review = Review(
            user_id=user_id,
            tmdb_movie_id=payload.tmdb_movie_id,
            title=payload.title,
            review_text=payload.review_text,
            rating=payload.rating
        )
        self.db.add(review)
        try:
            self.db.commit()
        except IntegrityError:
            # Only the user foreign key can fail once the fields are valid
            self.db.rollback()
            raise NotFoundError("User not found")
        self.db.refresh(review)

        logger.info(f"User {user_id} created review {review.id} for movie {review.tmdb_movie_id}")
        return review.id

    def update(self, review_id: int, payload: Union[ReviewUpdate, ReviewCreate]) -> None:
        """Replace title, text and rating together. Raises NotFoundError on zero rows."""
        validate_review_fields(payload.title, payload.review_text, payload.rating)

        changes = self.db.query(Review).filter(Review.id == review_id).update(
            {
                Review.title: payload.title,
                Review.review_text: payload.review_text,
                Review.rating: payload.rating,
            },
            synchronize_session=False
        )
        if changes == 0:
            self.db.rollback()
            raise NotFoundError("Review not found")
        self.db.commit()
        logger.info(f"Updated review {review_id}")

    def delete(self, review_id: int) -> None:
        """Delete a review and its likes. Raises NotFoundError on zero rows."""
        self.db.query(ReviewLike).filter(
            ReviewLike.review_id == review_id
        ).delete(synchronize_session=False)
        changes = self.db.query(Review).filter(
            Review.id == review_id
        ).delete(synchronize_session=False)
        if changes == 0:
            self.db.rollback()
            raise NotFoundError("Review not found")
        self.db.commit()
        logger.info(f"Deleted review {review_id}")

    def get_movie_stats(self, tmdb_movie_id: str) -> MovieRatingStats:
        """Review count and average rating (one decimal, half up, None without reviews)."""
        count, total = self.db.query(
            func.count(Review.id),
            func.sum(Review.rating)
        ).filter(Review.tmdb_movie_id == tmdb_movie_id).one()

        if not count:
            return MovieRatingStats(review_count=0, average_rating=None)

        # Ratings are integers, so the exact average is total / count
        average = (Decimal(total) / Decimal(count)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
        return MovieRatingStats(
            review_count=count,
            average_rating=float(average)
        )
