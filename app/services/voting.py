"""Voting service with atomic upserts for concurrent vote handling."""

import logging
from datetime import datetime
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import ValidationError
from pymongo import ReturnDocument

from app.models.vote import BatchVoteResult, Vote, VoteCreate

logger = logging.getLogger(__name__)


class VotingService:
    """Service for managing votes.

    A unique compound index on (movie_id, user_name) keeps one live vote
    per voter and movie; a repeat vote replaces vibe and seen.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.votes_collection = db.votes
        self.movies_collection = db.movies

    @staticmethod
    def _to_vote(doc: dict) -> Vote:
        return Vote(
            movie_id=doc.get("movie_id", ""),
            user_name=doc.get("user_name", ""),
            vibe=doc["vibe"],
            seen=doc["seen"],
            created_at=doc["created_at"],
            updated_at=doc["updated_at"],
        )

    async def vote(self, vote_data: VoteCreate) -> Vote:
        """Cast or replace a vote.

        The upsert is atomic, so concurrent votes from the same user
        on the same movie never produce duplicates.
        """
        if not ObjectId.is_valid(vote_data.movie_id):
            raise ValueError("Invalid movie_id")

        movie = await self.movies_collection.find_one(
            {"_id": ObjectId(vote_data.movie_id)},
            {"_id": 1},
        )
        if not movie:
            raise ValueError("Movie not found")

        now = datetime.utcnow()
        vote_doc = await self.votes_collection.find_one_and_update(
            {
                "movie_id": vote_data.movie_id,
                "user_name": vote_data.user_name,
            },
            {
                "$set": {
                    "vibe": vote_data.vibe,
                    "seen": vote_data.seen,
                    "updated_at": now,
                },
                "$setOnInsert": {
                    "movie_id": vote_data.movie_id,
                    "user_name": vote_data.user_name,
                    "created_at": now,
                },
            },
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )

        return self._to_vote(vote_doc)

    async def batch_vote(self, votes: list[dict]) -> BatchVoteResult:
        """Cast several votes, recording failures instead of aborting."""
        submitted = 0
        errors = []

        for raw_vote in votes:
            try:
                vote_data = VoteCreate(**raw_vote)
            except (TypeError, ValidationError):
                errors.append(f"Invalid vote data: {raw_vote}")
                continue

            try:
                await self.vote(vote_data)
                submitted += 1
            except ValueError as e:
                errors.append(f"Failed to process vote for movie {vote_data.movie_id}: {e}")

        if errors:
            logger.warning(f"Batch vote: {len(errors)} of {len(votes)} vote(s) rejected")

        return BatchVoteResult(
            success=submitted > 0,
            submitted_count=submitted,
            failed_count=len(errors),
            errors=errors,
        )

    async def remove_vote(self, movie_id: str, user_name: str) -> bool:
        """Remove a user's vote from a movie."""
        result = await self.votes_collection.delete_one({
            "movie_id": movie_id,
            "user_name": user_name,
        })
        return result.deleted_count > 0

    async def remove_movie_votes(self, movie_id: str) -> int:
        """Remove every vote on a movie."""
        result = await self.votes_collection.delete_many({"movie_id": movie_id})
        return result.deleted_count

    async def get_vote(self, movie_id: str, user_name: str) -> Vote | None:
        """Get a user's vote on a movie."""
        vote_doc = await self.votes_collection.find_one({
            "movie_id": movie_id,
            "user_name": user_name,
        })
        if vote_doc:
            return self._to_vote(vote_doc)
        return None

    async def list_votes(self, movie_id: str | None = None) -> list[Vote]:
        """List the poll's votes, optionally for a single movie."""
        query = {"movie_id": movie_id} if movie_id else {}
        votes = []
        async for vote_doc in self.votes_collection.find(query).sort("created_at", 1):
            votes.append(self._to_vote(vote_doc))
        return votes

    async def get_user_votes(self, user_name: str) -> dict[str, Vote]:
        """Get all of a user's votes, keyed by movie id."""
        votes = {}
        async for vote_doc in self.votes_collection.find({"user_name": user_name}):
            votes[vote_doc["movie_id"]] = self._to_vote(vote_doc)
        return votes

    async def get_voter_names(self) -> list[str]:
        """Get the distinct names of everyone who has voted."""
        names = await self.votes_collection.distinct("user_name")
        return sorted(names)
