"""Appeal models for MoviePoll."""

from datetime import datetime
from pydantic import BaseModel, Field


class AppealRecord(BaseModel):
    """Visibility-adjusted appeal of one movie."""
    movie_id: str
    original_appeal: float
    seen_count: int
    total_voters: int
    visibility_ratio: float
    visibility_modifier: float
    final_appeal: float
    total_unique_voters: int

    model_config = {"frozen": True}


class AppealResult(BaseModel):
    """Appeal records keyed by movie id."""
    records: dict[str, AppealRecord] = Field(default_factory=dict)
    total_unique_voters: int = 0


class RankedAppeal(AppealRecord):
    """Appeal record with its position in the ranking."""
    rank: int
    title: str


class AppealUpdateResponse(BaseModel):
    """Result of recalculating and storing appeal values."""
    updated: int
    removed: int = 0
    movies: dict[str, AppealRecord] = Field(default_factory=dict)
    total_unique_voters: int
    calculated_at: datetime


class VotingStats(BaseModel):
    """Poll-wide voting statistics."""
    total_movies: int = 0
    total_votes: int = 0
    unique_voters: int = 0
    movies_with_votes: int = 0
    average_appeal_score: float = 0.0
    most_voted_movie: str | None = None
    most_voted_count: int = 0
