"""
Review and review like models.
"""
from sqlalchemy import Column, String, Text, ForeignKey, Integer, CheckConstraint, PrimaryKeyConstraint
from sqlalchemy.orm import relationship
from imapi.db.base import Base, BaseModel


class Review(BaseModel):
    """A user's review of a TMDb movie."""
    __tablename__ = "reviews"

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    tmdb_movie_id = Column(String(32), nullable=False, index=True)
    title = Column(String(50), nullable=False)
    review_text = Column(Text, nullable=False)
    rating = Column(Integer, nullable=False)

    # Relationships
    user = relationship("User", back_populates="reviews")
    likes = relationship("ReviewLike", back_populates="review", passive_deletes=True)

    __table_args__ = (
        CheckConstraint("rating BETWEEN 1 AND 10", name="ck_review_rating_range"),
    )


class ReviewLike(Base):
    """Like membership row; at most one per (user, review) pair."""
    __tablename__ = "review_like"

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    review_id = Column(Integer, ForeignKey("reviews.id", ondelete="CASCADE"), nullable=False, index=True)

    # Relationships
    user = relationship("User", back_populates="likes")
    review = relationship("Review", back_populates="likes")

    __table_args__ = (
        PrimaryKeyConstraint("user_id", "review_id", name="pk_review_like"),
    )
