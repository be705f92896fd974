"""
Like ledger: idempotent (user, review) like membership.
"""
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import logging
from imapi.core.errors import NotFoundError
from imapi.models.review import Review, ReviewLike

logger = logging.getLogger(__name__)


class LikeLedger:
    """Adds and removes likes; present pairs and absent pairs are both no-ops."""

    def __init__(self, db: Session):
        self.db = db

    def has_liked(self, review_id: int, user_id: int) -> bool:
        return self.db.query(
            self.db.query(ReviewLike).filter(
                ReviewLike.review_id == review_id,
                ReviewLike.user_id == user_id
            ).exists()
        ).scalar()

    def like(self, review_id: int, user_id: int) -> None:
        """Record a like. Liking twice leaves exactly one row."""
        review_exists = self.db.query(
            self.db.query(Review).filter(Review.id == review_id).exists()
        ).scalar()
        if not review_exists:
            raise NotFoundError("Review not found")

        if self.has_liked(review_id, user_id):
            return

        self.db.add(ReviewLike(user_id=user_id, review_id=review_id))
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            if not self.has_liked(review_id, user_id):
                # The review exists, so the user foreign key failed
                raise NotFoundError("User not found")
            # A concurrent request inserted the same pair first
            logger.debug(f"Like ({user_id}, {review_id}) already recorded")

    def unlike(self, review_id: int, user_id: int) -> None:
        """Remove a like if present."""
        self.db.query(ReviewLike).filter(
            ReviewLike.review_id == review_id,
            ReviewLike.user_id == user_id
        ).delete(synchronize_session=False)
        self.db.commit()

    def count_likes(self, review_id: int) -> int:
        """Count like rows at read time."""
        return self.db.query(func.count(ReviewLike.user_id)).filter(
            ReviewLike.review_id == review_id
        ).scalar() or 0
