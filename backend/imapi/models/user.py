"""
User model for authentication and review ownership.
"""
from sqlalchemy import Column, String
from sqlalchemy.orm import relationship
from imapi.db.base import BaseModel


class User(BaseModel):
    """User model with immutable username."""
    __tablename__ = "users"

    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    username = Column(String(50), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    # Relationships
    reviews = relationship("Review", back_populates="user")
    likes = relationship("ReviewLike", back_populates="user")
