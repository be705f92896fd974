"""
Security utilities for JWT authentication and password hashing.
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
import hashlib
import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt
from imapi.core.config import settings
from imapi.core.errors import AuthError, AuthFailure


@dataclass(frozen=True)
class TokenClaims:
    """
    Claims of a bearer token whose signature and expiry were checked.

    Only ``verify_access_token`` builds these, so holding one means the token
    was verified earlier in the same call chain.
    """
    user_id: int
    expires_at: datetime
    payload: Dict[str, Any] = field(default_factory=dict, compare=False)


def _pre_hash_password(password: str) -> bytes:
    """
    Pre-hash password with SHA256 to support passwords longer than 72 bytes.
    Returns bytes (32 bytes) which is well under bcrypt's 72-byte limit.
    """
    return hashlib.sha256(password.encode('utf-8')).digest()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash. Never raises on mismatch."""
    pre_hashed = _pre_hash_password(plain_password)
    try:
        return bcrypt.checkpw(pre_hashed, hashed_password.encode('utf-8'))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def get_password_hash(password: str, rounds: Optional[int] = None) -> str:
    """
    Hash a password.
    Pre-hashes with SHA256 first to support passwords longer than 72 bytes,
    then salts and hashes with bcrypt at the configured work factor.
    """
    pre_hashed = _pre_hash_password(password)
    salt = bcrypt.gensalt(rounds=rounds if rounds is not None else settings.BCRYPT_ROUNDS)
    hashed = bcrypt.hashpw(pre_hashed, salt)
    return hashed.decode('utf-8')


def create_access_token(
    user_id: int,
    expires_delta: Optional[timedelta] = None,
    secret_key: Optional[str] = None,
    algorithm: Optional[str] = None,
) -> str:
    """Create a JWT access token carrying ``{"id": user_id}``."""
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode = {"id": user_id, "exp": expire}
    return jwt.encode(
        to_encode,
        secret_key if secret_key is not None else settings.SECRET_KEY,
        algorithm=algorithm if algorithm is not None else settings.ALGORITHM,
    )


def verify_access_token(
    token: str,
    secret_key: Optional[str] = None,
    algorithm: Optional[str] = None,
) -> TokenClaims:
    """
    Verify signature and expiry of a JWT and return its claims.

    Raises:
        AuthError: EXPIRED when the token is past its expiry, INVALID_TOKEN
            for a bad signature, a malformed token or a payload without an
            integer ``id``.
    """
    try:
        payload = jwt.decode(
            token,
            secret_key if secret_key is not None else settings.SECRET_KEY,
            algorithms=[algorithm if algorithm is not None else settings.ALGORITHM],
        )
    except ExpiredSignatureError:
        raise AuthError(AuthFailure.EXPIRED)
    except JWTError:
        raise AuthError(AuthFailure.INVALID_TOKEN)

    user_id = payload.get("id")
    exp = payload.get("exp")
    if not isinstance(user_id, int) or isinstance(user_id, bool) or exp is None:
        raise AuthError(AuthFailure.INVALID_TOKEN)

    return TokenClaims(
        user_id=user_id,
        expires_at=datetime.fromtimestamp(exp, tz=timezone.utc),
        payload=payload,
    )


class CredentialService:
    """Password hashing and token issuing bound to one secret and expiry."""

    def __init__(
        self,
        secret_key: str = None,
        algorithm: str = None,
        expires_minutes: int = None,
        bcrypt_rounds: int = None,
    ):
        self.secret_key = secret_key if secret_key is not None else settings.SECRET_KEY
        self.algorithm = algorithm if algorithm is not None else settings.ALGORITHM
        if expires_minutes is None:
            expires_minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES
        self.expires_delta = timedelta(minutes=expires_minutes)
        self.bcrypt_rounds = bcrypt_rounds if bcrypt_rounds is not None else settings.BCRYPT_ROUNDS

    def hash_password(self, password: str) -> str:
        return get_password_hash(password, rounds=self.bcrypt_rounds)

    def verify_password(self, password: str, hashed_password: str) -> bool:
        return verify_password(password, hashed_password)

    def issue_token(self, user_id: int) -> str:
        return create_access_token(
            user_id,
            expires_delta=self.expires_delta,
            secret_key=self.secret_key,
            algorithm=self.algorithm,
        )

    def verify_token(self, token: str) -> TokenClaims:
        return verify_access_token(
            token, secret_key=self.secret_key, algorithm=self.algorithm
        )
