"""Movie models for MoviePoll."""

from datetime import datetime
from pydantic import BaseModel, Field

from app.models.appeal import AppealRecord
from app.models.matching import MatchType


class MatchInfo(BaseModel):
    """How a stored movie was matched against the catalog."""
    match_type: MatchType
    similarity_score: float
    search_title: str
    search_year: int | None = None


class MovieCreate(BaseModel):
    """Model for adding a movie by title and year."""
    title: str = Field(..., min_length=1, max_length=500)
    year: int = Field(..., ge=1800, le=2100)
    use_matching: bool = True


class MovieUpdate(BaseModel):
    """Model for updating a movie.

    Changing the title or year re-runs catalog matching.
    """
    title: str | None = Field(default=None, min_length=1, max_length=500)
    year: int | None = Field(default=None, ge=1800, le=2100)
    use_matching: bool = True

    model_config = {"extra": "forbid"}


class Movie(BaseModel):
    """Movie model for API responses."""
    id: str = Field(..., alias="_id")
    tmdb_id: int
    title: str
    year: int | None = None
    overview: str | None = None
    poster_path: str | None = None
    backdrop_path: str | None = None
    release_date: str | None = None
    runtime: int | None = None
    adult: bool = False
    original_language: str | None = None
    original_title: str | None = None
    popularity: float | None = None
    vote_average: float | None = None
    vote_count: int | None = None
    video: bool = False
    genres: list[str] = Field(default_factory=list)
    videos: list[dict] = Field(default_factory=list)
    added_at: datetime
    updated_at: datetime
    match_info: MatchInfo | None = None
    appeal: AppealRecord | None = None

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
    }
