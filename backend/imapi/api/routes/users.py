"""
User lookup routes.
"""
from fastapi import APIRouter, Depends
from imapi.schemas.user import UserInfo
from imapi.core.security import TokenClaims
from imapi.services.user_service import UserService
from imapi.api.dependencies import get_current_claims, get_user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserInfo)
def get_current_user_info(
    claims: TokenClaims = Depends(get_current_claims),
    users: UserService = Depends(get_user_service)
):
    """Get current user information."""
    return users.get_user(claims.user_id)


@router.get("/{user_id}", response_model=UserInfo)
def get_user(
    user_id: int,
    claims: TokenClaims = Depends(get_current_claims),
    users: UserService = Depends(get_user_service)
):
    """Get user by ID."""
    return users.get_user(user_id)
