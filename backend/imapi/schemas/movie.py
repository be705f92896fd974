"""
Pydantic schemas for movies: TMDb payloads and API responses.
"""
from pydantic import BaseModel
from typing import List, Optional


class TmdbGenre(BaseModel):
    """TMDb v3 genre entry."""
    name: str


class TmdbMovieDetails(BaseModel):
    """TMDb v3: GET /movie/{movie_id}"""
    id: int
    title: str
    overview: Optional[str] = None
    release_date: Optional[str] = None
    runtime: Optional[int] = None  # minutes
    genres: List[TmdbGenre] = []
    poster_path: Optional[str] = None
    backdrop_path: Optional[str] = None


class TmdbMoviePageResult(BaseModel):
    """TMDb v3 movie page result entry."""
    id: int
    title: str
    release_date: Optional[str] = None
    poster_path: Optional[str] = None


class TmdbMoviePage(BaseModel):
    """TMDb v3: GET /movie/popular and GET /search/movie"""
    page: int
    results: List[TmdbMoviePageResult] = []
    total_pages: int
    total_results: int


class MovieRatingStats(BaseModel):
    """Statistics of local reviews for one movie."""
    review_count: int
    average_rating: Optional[float] = None


class MovieAggregate(BaseModel):
    """Movie details merged with local review statistics."""
    id: int
    title: str
    overview: Optional[str] = None
    release_date: Optional[str] = None
    runtime: Optional[int] = None
    genres: List[str] = []
    poster_path: Optional[str] = None
    backdrop_path: Optional[str] = None
    average_rating: Optional[float] = None
    review_count: int


class MoviePageResult(BaseModel):
    """Movie entry in a listing page."""
    id: int
    title: str
    release_date: Optional[str] = None
    poster_path: Optional[str] = None


class MoviePage(BaseModel):
    """A page of movies."""
    page: int
    results: List[MoviePageResult] = []
    total_pages: int
    total_results: int
