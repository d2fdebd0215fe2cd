"""Movie service: poll movies matched against the TMDB catalog."""

import logging
from datetime import datetime
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.config import get_settings
from app.models.matching import MatchConfig, MatchTarget, MatchType
from app.models.movie import MatchInfo, Movie, MovieCreate, MovieUpdate
from app.services.external_api import MovieDetails, TMDBClient
from app.services.matching import match_title
from app.services.voting import VotingService
from app.utils.helpers import object_id_or_none

logger = logging.getLogger(__name__)


class MovieMatchError(LookupError):
    """Raised when the catalog has no acceptable match for a title."""


class DuplicateMovieError(ValueError):
    """Raised when a matched movie is already in the poll."""


def match_config_from_settings() -> MatchConfig:
    settings = get_settings()
    return MatchConfig(
        flexible_threshold=settings.match_flexible_threshold,
        year_penalty=settings.match_year_penalty,
    )


class MovieService:
    """Service for managing the poll's movies.

    Movies are identified by title and year; the catalog entry is chosen
    with match_title unless matching is turned off, in which case the
    first search result is taken.
    """

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        tmdb_client: TMDBClient | None = None,
        match_config: MatchConfig | None = None,
    ):
        self.db = db
        self.collection = db.movies
        self.appeal_collection = db.appeal_calculations
        self.tmdb = tmdb_client or TMDBClient()
        self.match_config = match_config or match_config_from_settings()

    @staticmethod
    def _to_movie(doc: dict) -> Movie:
        doc["_id"] = str(doc["_id"])
        return Movie(**doc)

    async def find_match(
        self,
        title: str,
        year: int | None,
        use_matching: bool = True,
    ) -> tuple[MovieDetails, MatchInfo | None]:
        """Find a title in the catalog and fetch its details.

        Raises MovieMatchError when nothing suitable is found.
        """
        candidates = await self.tmdb.search_by_title(title, year)
        match_info = None

        if use_matching:
            result = match_title(MatchTarget(title=title, year=year), candidates, self.match_config)
            if result.match_type == MatchType.NONE or result.candidate is None:
                raise MovieMatchError(f'No good match found for "{title}" ({year})')
            chosen = result.candidate
            match_info = MatchInfo(
                match_type=result.match_type,
                similarity_score=result.score,
                search_title=title,
                search_year=year,
            )
            logger.info(
                f"Matched '{title}' ({year}) to TMDB {chosen.id} "
                f"'{chosen.title}' [{result.match_type.value}, score {result.score:.2f}]"
            )
        else:
            if not candidates:
                raise MovieMatchError(f'No results found for "{title}"')
            chosen = candidates[0]

        details = await self.tmdb.get_by_id(chosen.id)
        if details is None:
            raise MovieMatchError(f"Could not fetch details for TMDB movie {chosen.id}")
        return details, match_info

    @staticmethod
    def _details_fields(details: MovieDetails) -> dict:
        return {
            "tmdb_id": details.tmdb_id,
            "title": details.title,
            "year": details.year,
            "overview": details.overview,
            "poster_path": details.poster_path,
            "backdrop_path": details.backdrop_path,
            "release_date": details.release_date,
            "runtime": details.runtime,
            "adult": details.adult,
            "original_language": details.original_language,
            "original_title": details.original_title,
            "popularity": details.popularity or 0,
            "vote_average": details.vote_average or 0,
            "vote_count": details.vote_count or 0,
            "video": details.video,
            "genres": details.genres,
            "videos": details.videos,
        }

    async def add_movie(self, movie_data: MovieCreate) -> Movie:
        """Match a title/year against the catalog and add it to the poll."""
        details, match_info = await self.find_match(
            movie_data.title,
            movie_data.year,
            movie_data.use_matching,
        )

        existing = await self.collection.find_one({"tmdb_id": details.tmdb_id}, {"_id": 1})
        if existing:
            raise DuplicateMovieError("Movie already exists in database")

        now = datetime.utcnow()
        movie_doc = {
            **self._details_fields(details),
            "added_at": now,
            "updated_at": now,
            "match_info": match_info.model_dump(mode="json") if match_info else None,
        }

        try:
            result = await self.collection.insert_one(movie_doc)
        except DuplicateKeyError:
            raise DuplicateMovieError("Movie already exists in database")

        movie_doc["_id"] = result.inserted_id
        return self._to_movie(movie_doc)

    async def get_movie(self, movie_id: str) -> Movie | None:
        """Get a movie by ID."""
        object_id = object_id_or_none(movie_id)
        if object_id is None:
            return None

        doc = await self.collection.find_one({"_id": object_id})
        if doc:
            return self._to_movie(doc)
        return None

    async def list_movies(self, limit: int = 500, skip: int = 0) -> list[Movie]:
        """List poll movies alphabetically with their last stored appeal.

        Movies nobody has voted on yet are listed with no appeal.
        """
        appeals = {}
        async for doc in self.appeal_collection.find({}, {"_id": 0, "calculated_at": 0}):
            appeals[doc["movie_id"]] = doc

        movies = []
        cursor = self.collection.find({}).sort("title", 1).skip(skip).limit(limit)
        async for doc in cursor:
            doc["appeal"] = appeals.get(str(doc["_id"]))
            movies.append(self._to_movie(doc))
        return movies

    async def update_movie(self, movie_id: str, update_data: MovieUpdate) -> Movie | None:
        """Update a movie, re-matching it when its title or year changes."""
        movie = await self.get_movie(movie_id)
        if not movie:
            return None

        title = update_data.title or movie.title
        year = update_data.year if update_data.year is not None else movie.year
        if title == movie.title and year == movie.year:
            return movie

        details, match_info = await self.find_match(title, year, update_data.use_matching)

        clash = await self.collection.find_one({
            "tmdb_id": details.tmdb_id,
            "_id": {"$ne": ObjectId(movie_id)},
        })
        if clash:
            raise DuplicateMovieError("Another movie already uses this TMDB entry")

        doc = await self.collection.find_one_and_update(
            {"_id": ObjectId(movie_id)},
            {
                "$set": {
                    **self._details_fields(details),
                    "updated_at": datetime.utcnow(),
                    "match_info": match_info.model_dump(mode="json") if match_info else None,
                }
            },
            return_document=ReturnDocument.AFTER,
        )
        if doc:
            return self._to_movie(doc)
        return None

    async def delete_movie(self, movie_id: str) -> bool:
        """Delete a movie together with its votes and stored appeal."""
        object_id = object_id_or_none(movie_id)
        if object_id is None:
            return False

        result = await self.collection.delete_one({"_id": object_id})
        if result.deleted_count == 0:
            return False

        removed_votes = await VotingService(self.db).remove_movie_votes(movie_id)
        await self.appeal_collection.delete_one({"movie_id": movie_id})
        logger.info(f"Deleted movie {movie_id} and {removed_votes} vote(s)")
        return True

