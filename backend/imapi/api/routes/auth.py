"""
Authentication routes for registration and login.
"""
from fastapi import APIRouter, Depends, Response, status
from imapi.schemas.user import UserCreate, UserLogin, Token, CreatedResponse
from imapi.services.user_service import UserService
from imapi.api.dependencies import get_user_service

router = APIRouter(prefix="/users", tags=["auth"])


@router.post("/register", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserCreate,
    response: Response,
    users: UserService = Depends(get_user_service)
):
    """Register a new user."""
    user_id = users.register(user_data)
    response.headers["Location"] = f"/api/users/{user_id}"
    return CreatedResponse(id=user_id)


@router.post("/login", response_model=Token)
def login(credentials: UserLogin, users: UserService = Depends(get_user_service)):
    """Login and get JWT token."""
    access_token = users.login(credentials.username, credentials.password)
    return Token(access_token=access_token)
