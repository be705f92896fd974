"""
Shared fixtures: in-memory database, fake movie source and an API client.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("TMDB_TOKEN", "test-tmdb-token")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import imapi.models  # noqa: F401
from imapi.core.errors import UpstreamError
from imapi.core.security import CredentialService
from imapi.db.base import Base
from imapi.db.session import enable_sqlite_foreign_keys, get_db
from imapi.main import app
from imapi.api.dependencies import get_movie_source
from imapi.models.user import User
from imapi.schemas.movie import TmdbMovieDetails, TmdbMoviePage

REVIEW_TEXT = "A mind-bending classic that still holds up today!!"  # 50 characters


class FakeMovieSource:
    """In-process stand-in for TMDb."""

    def __init__(self):
        self.movies = {
            "603": TmdbMovieDetails(
                id=603,
                title="The Matrix",
                overview="A hacker learns the truth about his reality.",
                release_date="1999-03-30",
                runtime=136,
                genres=[{"name": "Action"}, {"name": "Science Fiction"}],
                poster_path="/matrix.jpg",
                backdrop_path="/matrix-backdrop.jpg",
            ),
            "604": TmdbMovieDetails(
                id=604,
                title="The Matrix Reloaded",
                genres=[],
            ),
        }
        self.fail = False
        self.search_queries = []

    def _page(self, movies):
        return TmdbMoviePage(
            page=1,
            results=[
                {"id": m.id, "title": m.title, "release_date": m.release_date, "poster_path": m.poster_path}
                for m in movies
            ],
            total_pages=1,
            total_results=len(movies),
        )

    def get_movie(self, movie_id):
        if self.fail:
            raise UpstreamError("Tmdb client error: HTTP 503")
        if movie_id not in self.movies:
            raise UpstreamError("Tmdb client error: HTTP 404")
        return self.movies[movie_id]

    def get_popular_movies(self):
        if self.fail:
            raise UpstreamError("Tmdb client error: HTTP 503")
        return self._page(list(self.movies.values())[:1])

    def search_movies(self, query):
        if self.fail:
            raise UpstreamError("Tmdb client error: HTTP 503")
        self.search_queries.append(query)
        return self._page([m for m in self.movies.values() if query.lower() in m.title.lower()])


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def credentials():
    return CredentialService(secret_key="test-secret-key", bcrypt_rounds=4)


@pytest.fixture
def make_user(db, credentials):
    """Insert a user directly and return its id."""
    def _make_user(username, password="longenoughpassword"):
        user = User(
            first_name=username.capitalize(),
            last_name="Tester",
            username=username,
            password_hash=credentials.hash_password(password),
        )
        db.add(user)
        db.commit()
        return user.id
    return _make_user


@pytest.fixture
def fake_movies():
    return FakeMovieSource()


@pytest.fixture
def client(session_factory, fake_movies):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_movie_source] = lambda: fake_movies
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def register_and_login(client):
    """Register a user through the API and return bearer auth headers."""
    def _register_and_login(username, password="longenoughpassword"):
        response = client.post(
            "/api/users/register",
            json={
                "first_name": username.capitalize(),
                "last_name": "Tester",
                "username": username,
                "password": password,
            },
        )
        assert response.status_code == 201
        response = client.post(
            "/api/users/login",
            json={"username": username, "password": password},
        )
        assert response.status_code == 200
        return {"Authorization": f"Bearer {response.json()['access_token']}"}
    return _register_and_login


@pytest.fixture
def review_payload():
    return {
        "tmdb_movie_id": "603",
        "title": "Great",
        "review_text": REVIEW_TEXT,
        "rating": 8,
    }
