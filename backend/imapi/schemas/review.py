"""
Pydantic schemas for Review entity.
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

TITLE_MAX_LENGTH = 50
REVIEW_TEXT_MIN_LENGTH = 50
REVIEW_TEXT_MAX_LENGTH = 1000
RATING_MIN = 1
RATING_MAX = 10


class ReviewUpdate(BaseModel):
    """Schema for review update; all three fields are replaced together."""
    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    review_text: str = Field(..., min_length=REVIEW_TEXT_MIN_LENGTH, max_length=REVIEW_TEXT_MAX_LENGTH)
    rating: int = Field(..., ge=RATING_MIN, le=RATING_MAX)


class ReviewCreate(ReviewUpdate):
    """Schema for review creation."""
    tmdb_movie_id: str = Field(..., min_length=1, max_length=32)


class ReviewResponse(BaseModel):
    """Review with owner username and current like count."""
    id: int
    user_id: int
    tmdb_movie_id: str
    title: str
    review_text: str
    rating: int
    created_at: datetime
    username: str
    likes: int

    class Config:
        from_attributes = True


class MovieReviewResponse(ReviewResponse):
    """Review listed under a movie; liked_by_me is null for anonymous callers."""
    liked_by_me: Optional[bool] = None
