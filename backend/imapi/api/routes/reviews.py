"""
Review routes: authoring, listing and likes.
"""
from fastapi import APIRouter, Depends, Response, status
from typing import List
from imapi.core.security import TokenClaims
from imapi.schemas.review import ReviewCreate, ReviewUpdate, ReviewResponse
from imapi.schemas.user import CreatedResponse
from imapi.services.access_gate import AccessGate
from imapi.services.like_ledger import LikeLedger
from imapi.services.review_store import ReviewStore
from imapi.api.dependencies import (
    get_access_gate, get_current_claims, get_like_ledger, get_review_store
)

router = APIRouter(prefix="/reviews", tags=["reviews"])


# "/me" routes must come before "/{review_id}"
@router.get("/me", response_model=List[ReviewResponse])
def list_my_reviews(
    claims: TokenClaims = Depends(get_current_claims),
    reviews: ReviewStore = Depends(get_review_store)
):
    """Get the caller's reviews, oldest first."""
    return reviews.list_by_user(claims.user_id)


@router.post("/me", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
def create_review(
    payload: ReviewCreate,
    response: Response,
    claims: TokenClaims = Depends(get_current_claims),
    reviews: ReviewStore = Depends(get_review_store)
):
    """Create a review owned by the caller."""
    review_id = reviews.create(claims.user_id, payload)
    response.headers["Location"] = f"/api/reviews/{review_id}"
    return CreatedResponse(id=review_id)


@router.get("/{review_id}", response_model=ReviewResponse)
def get_one_review(review_id: int, reviews: ReviewStore = Depends(get_review_store)):
    """Get one review with its like count."""
    return reviews.get_one(review_id)


@router.put("/{review_id}/me", status_code=status.HTTP_204_NO_CONTENT)
def update_review(
    review_id: int,
    payload: ReviewUpdate,
    claims: TokenClaims = Depends(get_current_claims),
    gate: AccessGate = Depends(get_access_gate),
    reviews: ReviewStore = Depends(get_review_store)
):
    """Replace title, text and rating of the caller's review."""
    gate.require_owner(review_id, claims)
    reviews.update(review_id, payload)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{review_id}/me", status_code=status.HTTP_204_NO_CONTENT)
def delete_review(
    review_id: int,
    claims: TokenClaims = Depends(get_current_claims),
    gate: AccessGate = Depends(get_access_gate),
    reviews: ReviewStore = Depends(get_review_store)
):
    """Delete the caller's review along with its likes."""
    gate.require_owner(review_id, claims)
    reviews.delete(review_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{review_id}/like", status_code=status.HTTP_201_CREATED)
def like_review(
    review_id: int,
    claims: TokenClaims = Depends(get_current_claims),
    likes: LikeLedger = Depends(get_like_ledger)
):
    """Like a review. Liking again is a no-op."""
    likes.like(review_id, claims.user_id)
    return Response(status_code=status.HTTP_201_CREATED)


@router.delete("/{review_id}/like", status_code=status.HTTP_204_NO_CONTENT)
def unlike_review(
    review_id: int,
    claims: TokenClaims = Depends(get_current_claims),
    likes: LikeLedger = Depends(get_like_ledger)
):
    """Remove the caller's like. Removing an absent like is a no-op."""
    likes.unlike(review_id, claims.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
