"""
Access gate: caller existence and ownership checks for review mutations.
"""
from sqlalchemy.orm import Session
import logging
from imapi.core.errors import AuthError, AuthFailure
from imapi.core.security import TokenClaims
from imapi.models.user import User
from imapi.services.review_store import ReviewStore

logger = logging.getLogger(__name__)


def require_known_user(db: Session, claims: TokenClaims) -> None:
    """
    Reject verified claims whose user is gone.

    A token stays valid until it expires, even if the database was reset
    after it was issued.
    """
    user_exists = db.query(
        db.query(User).filter(User.id == claims.user_id).exists()
    ).scalar()
    if not user_exists:
        logger.warning(f"Token for unknown user {claims.user_id} rejected")
        raise AuthError(AuthFailure.INVALID_TOKEN)


class AccessGate:
    """Decides whether verified claims may modify a review."""

    def __init__(self, reviews: ReviewStore):
        self.reviews = reviews

    def require_owner(self, review_id: int, claims: TokenClaims) -> None:
        """Raise NotFoundError for a missing review, AuthError(NOT_OWNER) for someone else's."""
        owner_id = self.reviews.get_owner_id(review_id)
        if owner_id != claims.user_id:
            logger.warning(f"User {claims.user_id} tried to modify review {review_id} owned by {owner_id}")
            raise AuthError(AuthFailure.NOT_OWNER)
