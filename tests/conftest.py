"""Pytest configuration and fixtures for MoviePoll tests."""

import os
from datetime import datetime
from typing import AsyncGenerator
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

# Set test environment before importing app modules
os.environ["MONGODB_URL"] = os.environ.get("TEST_MONGODB_URL", "mongodb://localhost:27017")
os.environ["MONGODB_DATABASE"] = "moviepoll_test"
os.environ["MONGODB_TIMEOUT_MS"] = "2000"
os.environ["TMDB_API_KEY"] = "test_key"

from app.main import app
from app.database import Database
from app.services.voting import VotingService
from app.services.appeal import AppealService


@pytest_asyncio.fixture(scope="function")
async def db() -> AsyncGenerator[AsyncIOMotorDatabase, None]:
    """Get test database connection and clean up after each test.

    Skips the test when no MongoDB server is reachable.
    """
    try:
        await Database.connect()
    except PyMongoError as e:
        await Database.disconnect()
        pytest.skip(f"MongoDB not available: {e}")
    database = Database.get_db()

    yield database

    # Clean up all collections after each test
    await database.movies.delete_many({})
    await database.votes.delete_many({})
    await database.appeal_calculations.delete_many({})

    await Database.disconnect()


@pytest_asyncio.fixture
async def api_client() -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for endpoints that do not touch the database."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def client(db: AsyncIOMotorDatabase) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def voting_service(db: AsyncIOMotorDatabase) -> VotingService:
    """Create voting service for testing."""
    return VotingService(db)


@pytest_asyncio.fixture
async def appeal_service(db: AsyncIOMotorDatabase) -> AppealService:
    """Create appeal service for testing."""
    return AppealService(db)


@pytest_asyncio.fixture
async def poll_movies(db: AsyncIOMotorDatabase) -> dict[str, str]:
    """Insert a few poll movies, returning title -> movie id."""
    now = datetime.utcnow()
    movies = [
        (27205, "Inception", 2010),
        (603, "The Matrix", 1999),
        (157336, "Interstellar", 2014),
        (680, "Pulp Fiction", 1994),
    ]
    ids = {}
    for tmdb_id, title, year in movies:
        result = await db.movies.insert_one({
            "tmdb_id": tmdb_id,
            "title": title,
            "year": year,
            "release_date": f"{year}-01-01",
            "added_at": now,
            "updated_at": now,
        })
        ids[title] = str(result.inserted_id)
    return ids


@pytest.fixture
def mock_tmdb_search():
    """Mock TMDB search response with a remake and an unrelated film."""
    return {
        "page": 1,
        "results": [
            {
                "id": 60935,
                "title": "The Thing",
                "original_title": "The Thing",
                "release_date": "2011-10-14",
                "popularity": 30.1,
                "vote_average": 6.2,
            },
            {
                "id": 1091,
                "title": "The Thing",
                "original_title": "The Thing",
                "release_date": "1982-06-25",
                "popularity": 45.3,
                "vote_average": 8.1,
            },
            {
                "id": 10925,
                "title": "The Thing from Another World",
                "original_title": "The Thing from Another World",
                "release_date": "1951-04-06",
                "popularity": 9.7,
                "vote_average": 6.9,
            },
        ],
        "total_results": 3,
        "total_pages": 1,
    }


@pytest.fixture
def mock_tmdb_movie_details():
    """Mock TMDB movie details response."""
    return {
        "id": 1091,
        "title": "The Thing",
        "original_title": "The Thing",
        "original_language": "en",
        "poster_path": "/tzGY49kseSE9QAKk47uuDGwnSCu.jpg",
        "backdrop_path": "/8r6L7ZhfWuJ3uPYsW7eXGzFmNAm.jpg",
        "release_date": "1982-06-25",
        "runtime": 109,
        "popularity": 45.3,
        "vote_average": 8.1,
        "vote_count": 7000,
        "adult": False,
        "video": False,
        "genres": [
            {"id": 27, "name": "Horror"},
            {"id": 9648, "name": "Mystery"},
            {"id": 878, "name": "Science Fiction"},
        ],
        "overview": "A research team in Antarctica is hunted by a shape-shifting alien...",
        "videos": {
            "results": [
                {
                    "key": "5ftmr17H_4s",
                    "name": "Official Trailer",
                    "site": "YouTube",
                    "type": "Trailer",
                    "official": True,
                }
            ]
        },
    }
