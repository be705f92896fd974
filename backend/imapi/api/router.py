"""
Main API router that includes all route modules.
"""
from fastapi import APIRouter
from imapi.api.routes import auth, users, reviews, movies

api_router = APIRouter()

# Include all route modules
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(reviews.router)
api_router.include_router(movies.router)
