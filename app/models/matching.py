"""Title matching models for MoviePoll."""

import math
from enum import Enum
from pydantic import BaseModel, Field, field_serializer


class MatchType(str, Enum):
    """Confidence tier of a title match."""
    EXACT = "exact"
    FLEXIBLE = "flexible"
    FALLBACK = "fallback"
    NONE = "none"


class MatchCandidate(BaseModel):
    """One movie from a catalog search."""
    id: int
    title: str
    original_title: str | None = None
    release_date: str | None = None
    popularity: float | None = None
    vote_average: float | None = None
    vote_count: int | None = None
    overview: str | None = None
    poster_path: str | None = None
    backdrop_path: str | None = None
    original_language: str | None = None
    genre_ids: list[int] = Field(default_factory=list)
    adult: bool = False
    video: bool = False

    model_config = {"extra": "ignore"}


class MatchTarget(BaseModel):
    """A locally known title to look up in the catalog."""
    title: str = Field(..., min_length=1)
    year: int | None = None


class MatchResult(BaseModel):
    """Best candidate for a target, or none."""
    candidate: MatchCandidate | None = None
    score: float
    match_type: MatchType

    @field_serializer("score")
    def _serialize_score(self, score: float) -> float | None:
        # JSON has no infinity; an empty search has no score
        return score if math.isfinite(score) else None


class SimilarityWeights(BaseModel):
    """Weights of the combined similarity score (lower score is closer)."""
    phrase_weight: float = 0.6
    words_weight: float = 1.2
    length_weight: float = -0.2
    min_weight: float = 8.0
    max_weight: float = 1.5

    model_config = {"frozen": True}


MOVIE_TITLE_WEIGHTS = SimilarityWeights()
GENERIC_WEIGHTS = SimilarityWeights(
    phrase_weight=0.5,
    words_weight=1.0,
    length_weight=-0.3,
    min_weight=10.0,
    max_weight=1.0,
)


class MatchConfig(BaseModel):
    """Tuning for match_title."""
    weights: SimilarityWeights = MOVIE_TITLE_WEIGHTS
    flexible_threshold: float = 15.0
    year_penalty: float = 10.0
    year_tolerance: int = 1

    model_config = {"frozen": True}


class MatchRequest(BaseModel):
    """Request body for matching a title against supplied candidates."""
    target: MatchTarget
    candidates: list[MatchCandidate] = Field(default_factory=list)


class SearchResponse(BaseModel):
    """Catalog search results, narrowed to the best match when a year is given."""
    results: list[MatchCandidate]
    total_results: int
    match_info: dict | None = None
