"""MongoDB database connection and setup."""

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import IndexModel, ASCENDING, DESCENDING
from typing import AsyncGenerator
import logging
import certifi

from app.config import get_settings

logger = logging.getLogger(__name__)


class Database:
    """MongoDB database manager."""

    client: AsyncIOMotorClient | None = None
    db: AsyncIOMotorDatabase | None = None

    @classmethod
    async def connect(cls) -> None:
        """Connect to MongoDB and set up indexes."""
        settings = get_settings()

        client_options: dict = {
            "serverSelectionTimeoutMS": settings.mongodb_timeout_ms,
            "connectTimeoutMS": 20000,
            "socketTimeoutMS": 20000,
        }

        # Hosted clusters need an explicit CA bundle for TLS.
        if settings.mongodb_url.startswith("mongodb+srv://"):
            client_options["tls"] = True
            client_options["tlsCAFile"] = certifi.where()

        cls.client = AsyncIOMotorClient(settings.mongodb_url, **client_options)
        cls.db = cls.client[settings.mongodb_database]

        # Verify connectivity before creating indexes.
        await cls.client.admin.command("ping")
        logger.info(f"Connected to MongoDB database: {settings.mongodb_database}")
        await cls._create_indexes()

    @classmethod
    async def disconnect(cls) -> None:
        """Disconnect from MongoDB."""
        if cls.client:
            cls.client.close()
            cls.client = None
            cls.db = None
            logger.info("Disconnected from MongoDB")

    @classmethod
    async def _create_indexes(cls) -> None:
        """Create necessary indexes for all collections."""
        if cls.db is None:
            raise RuntimeError("Database not connected")

        # Movies collection - one poll entry per TMDB movie
        await cls.db.movies.create_indexes([
            IndexModel([("tmdb_id", ASCENDING)], unique=True, name="tmdb_unique"),
            IndexModel([("title", ASCENDING)]),
        ])

        # Votes collection - unique compound index keeps one live vote per voter and movie
        await cls.db.votes.create_indexes([
            IndexModel(
                [("movie_id", ASCENDING), ("user_name", ASCENDING)],
                unique=True,
                name="movie_user_unique",
            ),
            IndexModel([("user_name", ASCENDING)], name="voter_lookup"),
            IndexModel([("created_at", ASCENDING)]),
        ])

        # Appeal calculations - one stored calculation per movie
        await cls.db.appeal_calculations.create_indexes([
            IndexModel([("movie_id", ASCENDING)], unique=True, name="appeal_movie_unique"),
            IndexModel([("final_appeal", DESCENDING)]),
        ])

        logger.info("Database indexes created successfully")

    @classmethod
    def get_db(cls) -> AsyncIOMotorDatabase:
        """Get the database instance."""
        if cls.db is None:
            raise RuntimeError("Database not connected. Call Database.connect() first.")
        return cls.db


async def get_database() -> AsyncGenerator[AsyncIOMotorDatabase, None]:
    """Dependency for getting database instance."""
    yield Database.get_db()
