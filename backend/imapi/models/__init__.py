"""Models package - Import all models for SQLAlchemy registration."""
from imapi.models.user import User
from imapi.models.review import Review, ReviewLike

__all__ = [
    "User",
    "Review",
    "ReviewLike",
]
