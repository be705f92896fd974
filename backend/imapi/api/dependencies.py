"""
Request-scoped dependencies: verified identity and service construction.
"""
from typing import Iterator, Optional
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from imapi.core.errors import AuthError, AuthFailure
from imapi.core.security import CredentialService, TokenClaims
from imapi.db.session import get_db
from imapi.services.access_gate import AccessGate, require_known_user
from imapi.services.like_ledger import LikeLedger
from imapi.services.movie_source import MovieSource, TmdbClient
from imapi.services.rating_aggregator import RatingAggregator
from imapi.services.review_store import ReviewStore
from imapi.services.user_service import UserService

bearer_scheme = HTTPBearer(auto_error=False)


def get_credentials() -> CredentialService:
    return CredentialService()


def get_current_claims(
    auth: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    credentials: CredentialService = Depends(get_credentials),
    db: Session = Depends(get_db)
) -> TokenClaims:
    """Verified claims of an existing caller; raises AuthError otherwise."""
    if auth is None or not auth.credentials:
        raise AuthError(AuthFailure.MISSING_TOKEN)
    claims = credentials.verify_token(auth.credentials)
    require_known_user(db, claims)
    return claims


def get_optional_claims(
    auth: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    credentials: CredentialService = Depends(get_credentials),
    db: Session = Depends(get_db)
) -> Optional[TokenClaims]:
    """Verified claims if a token was sent, else None. A sent token must verify."""
    if auth is None or not auth.credentials:
        return None
    claims = credentials.verify_token(auth.credentials)
    require_known_user(db, claims)
    return claims


def get_user_service(
    db: Session = Depends(get_db),
    credentials: CredentialService = Depends(get_credentials)
) -> UserService:
    return UserService(db, credentials)


def get_review_store(db: Session = Depends(get_db)) -> ReviewStore:
    return ReviewStore(db)


def get_like_ledger(db: Session = Depends(get_db)) -> LikeLedger:
    return LikeLedger(db)


def get_access_gate(reviews: ReviewStore = Depends(get_review_store)) -> AccessGate:
    return AccessGate(reviews)


def get_movie_source() -> Iterator[MovieSource]:
    """TMDb client for one request, closed afterwards."""
    client = TmdbClient()
    try:
        yield client
    finally:
        client.close()


def get_rating_aggregator(
    reviews: ReviewStore = Depends(get_review_store),
    movie_source: MovieSource = Depends(get_movie_source)
) -> RatingAggregator:
    return RatingAggregator(reviews, movie_source)
