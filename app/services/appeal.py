"""Appeal scoring: turns raw votes into visibility-adjusted rankings."""

import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping
from datetime import datetime
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.models.appeal import (
    AppealRecord,
    AppealResult,
    AppealUpdateResponse,
    RankedAppeal,
    VotingStats,
)
from app.models.vote import Vote, MIN_VIBE, MAX_VIBE
from app.services.voting import VotingService

logger = logging.getLogger(__name__)

DEFAULT_VISIBILITY_FLOOR = 0.1


class AppealValidationError(ValueError):
    """Raised when votes cannot be aggregated.

    Carries every offending vote so callers can report them all at once.
    """

    def __init__(self, invalid_votes: list[tuple[Vote, str]]):
        self.invalid_votes = invalid_votes
        reasons = "; ".join(
            f"{vote.user_name or '?'}@{vote.movie_id or '?'}: {reason}"
            for vote, reason in invalid_votes
        )
        super().__init__(f"{len(invalid_votes)} invalid vote(s): {reasons}")


def _vote_error(vote: Vote) -> str | None:
    if not vote.movie_id:
        return "missing movie_id"
    if isinstance(vote.vibe, bool) or not MIN_VIBE <= vote.vibe <= MAX_VIBE:
        return f"vibe {vote.vibe} outside {MIN_VIBE}-{MAX_VIBE}"
    return None


def latest_votes(votes: Iterable[Vote]) -> list[Vote]:
    """Keep only the most recent vote per (movie_id, user_name).

    On equal updated_at the vote seen last wins.
    """
    latest: dict[tuple[str, str], Vote] = {}
    for vote in votes:
        key = (vote.movie_id, vote.user_name)
        current = latest.get(key)
        if current is None or vote.updated_at >= current.updated_at:
            latest[key] = vote
    return list(latest.values())


def compute_appeal(
    votes: Iterable[Vote],
    visibility_floor: float = DEFAULT_VISIBILITY_FLOOR,
) -> AppealResult:
    """Aggregate votes into one appeal record per voted movie.

    The whole call fails with AppealValidationError if any vote has a
    missing movie_id or a vibe outside 1-6; nothing is skipped silently.

    For each movie:
    - original_appeal is the mean vibe
    - visibility_ratio is the share of voters who have seen it
    - final_appeal = original_appeal * max(visibility_floor, visibility_ratio)
    """
    votes = list(votes)
    invalid = []
    for vote in votes:
        error = _vote_error(vote)
        if error:
            invalid.append((vote, error))
    if invalid:
        raise AppealValidationError(invalid)

    live_votes = latest_votes(votes)
    total_unique_voters = len({vote.user_name for vote in live_votes})

    by_movie: dict[str, list[Vote]] = defaultdict(list)
    for vote in live_votes:
        by_movie[vote.movie_id].append(vote)

    records = {}
    for movie_id, movie_votes in by_movie.items():
        total_voters = len(movie_votes)
        seen_count = sum(1 for vote in movie_votes if vote.seen)
        original_appeal = sum(vote.vibe for vote in movie_votes) / total_voters
        visibility_ratio = seen_count / total_voters
        visibility_modifier = max(visibility_floor, visibility_ratio)

        records[movie_id] = AppealRecord(
            movie_id=movie_id,
            original_appeal=original_appeal,
            seen_count=seen_count,
            total_voters=total_voters,
            visibility_ratio=visibility_ratio,
            visibility_modifier=visibility_modifier,
            final_appeal=original_appeal * visibility_modifier,
            total_unique_voters=total_unique_voters,
        )

    return AppealResult(records=records, total_unique_voters=total_unique_voters)


def rank_appeal(
    result: AppealResult,
    titles: Mapping[str, str] | None = None,
) -> list[RankedAppeal]:
    """Order records for display.

    Highest final_appeal first; ties go to the movie with more voters, then
    to the alphabetically first title, then to the lower movie id.
    """
    titles = titles or {}

    def sort_key(record: AppealRecord):
        title = titles.get(record.movie_id, "")
        return (-record.final_appeal, -record.total_voters, title.lower(), record.movie_id)

    ordered = sorted(result.records.values(), key=sort_key)
    return [
        RankedAppeal(
            **record.model_dump(),
            rank=position,
            title=titles.get(record.movie_id, ""),
        )
        for position, record in enumerate(ordered, start=1)
    ]


def summarize_votes(
    votes: Iterable[Vote],
    result: AppealResult,
    titles: Mapping[str, str] | None = None,
) -> VotingStats:
    """Poll-wide statistics over the live votes and their appeal result."""
    titles = titles or {}
    live_votes = latest_votes(votes)
    records = list(result.records.values())

    stats = VotingStats(
        total_movies=len(titles) if titles else len(records),
        total_votes=len(live_votes),
        unique_voters=result.total_unique_voters,
        movies_with_votes=len(records),
    )
    if records:
        stats.average_appeal_score = sum(r.final_appeal for r in records) / len(records)
        most_voted = min(
            records,
            key=lambda r: (-r.total_voters, titles.get(r.movie_id, "").lower(), r.movie_id),
        )
        stats.most_voted_movie = titles.get(most_voted.movie_id, most_voted.movie_id)
        stats.most_voted_count = most_voted.total_voters
    return stats


class AppealService:
    """Service that recalculates appeal from the vote store and persists it.

    One document per voted movie lives in appeal_calculations; calculations
    for movies that have lost all their votes are removed.
    """

    def __init__(self, db: AsyncIOMotorDatabase, visibility_floor: float = DEFAULT_VISIBILITY_FLOOR):
        self.db = db
        self.collection = db.appeal_calculations
        self.movies_collection = db.movies
        self.voting = VotingService(db)
        self.visibility_floor = visibility_floor

    async def _movie_titles(self) -> dict[str, str]:
        titles = {}
        async for doc in self.movies_collection.find({}, {"title": 1}):
            titles[str(doc["_id"])] = doc["title"]
        return titles

    async def calculate(self) -> AppealResult:
        """Compute appeal from the current vote set without storing it."""
        votes = await self.voting.list_votes()
        return compute_appeal(votes, visibility_floor=self.visibility_floor)

    async def update_appeal(self) -> AppealUpdateResponse:
        """Recalculate appeal for every voted movie and store the results."""
        result = await self.calculate()
        titles = await self._movie_titles()
        calculated_at = datetime.utcnow()

        for movie_id, record in result.records.items():
            await self.collection.update_one(
                {"movie_id": movie_id},
                {"$set": {**record.model_dump(), "calculated_at": calculated_at}},
                upsert=True,
            )

        stale = await self.collection.delete_many(
            {"movie_id": {"$nin": list(result.records)}}
        )

        logger.info(
            f"Appeal updated for {len(result.records)} movie(s), "
            f"{result.total_unique_voters} unique voter(s)"
        )

        return AppealUpdateResponse(
            updated=len(result.records),
            removed=stale.deleted_count,
            movies={
                titles.get(movie_id, movie_id): record
                for movie_id, record in result.records.items()
            },
            total_unique_voters=result.total_unique_voters,
            calculated_at=calculated_at,
        )

    async def get_rankings(self) -> list[RankedAppeal]:
        """Recalculate appeal and return it ranked for display."""
        result = await self.calculate()
        titles = await self._movie_titles()
        return rank_appeal(result, titles)

    async def get_stored_appeal(self, movie_id: str) -> AppealRecord | None:
        """Get the last stored calculation for a movie."""
        doc = await self.collection.find_one({"movie_id": movie_id}, {"_id": 0, "calculated_at": 0})
        if doc:
            return AppealRecord(**doc)
        return None

    async def get_stats(self) -> VotingStats:
        """Get poll-wide voting statistics."""
        votes = await self.voting.list_votes()
        result = compute_appeal(votes, visibility_floor=self.visibility_floor)
        titles = await self._movie_titles()
        return summarize_votes(votes, result, titles)
