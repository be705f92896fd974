"""
User service for registration, login and lookup.
"""
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import logging
from imapi.core.errors import AuthError, AuthFailure, ConflictError, NotFoundError
from imapi.core.security import CredentialService
from imapi.models.user import User
from imapi.schemas.user import UserCreate

logger = logging.getLogger(__name__)


class UserService:
    """User accounts backed by the users table."""

    def __init__(self, db: Session, credentials: CredentialService):
        self.db = db
        self.credentials = credentials

    def register(self, payload: UserCreate) -> int:
        """Create a user and return its id. Raises ConflictError on a taken username."""
        existing_user = self.db.query(User).filter(User.username == payload.username).first()
        if existing_user:
            raise ConflictError("User already exists")

        user = User(
            first_name=payload.first_name,
            last_name=payload.last_name,
            username=payload.username,
            password_hash=self.credentials.hash_password(payload.password)
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race on the unique username index
            self.db.rollback()
            raise ConflictError("User already exists")
        self.db.refresh(user)

        logger.info(f"Registered user {user.id} ({user.username})")
        return user.id

    def login(self, username: str, password: str) -> str:
        """
        Authenticate and return a bearer token.

        Unknown usernames and wrong passwords fail with the same AuthError so
        the response does not reveal which one was wrong.
        """
        user = self.db.query(User).filter(User.username == username).first()
        if not user or not self.credentials.verify_password(password, user.password_hash):
            logger.info("Failed login attempt")
            raise AuthError(AuthFailure.BAD_CREDENTIALS)

        return self.credentials.issue_token(user.id)

    def get_user(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError("User not found")
        return user
