"""Pydantic models for MoviePoll."""

from app.models.vote import (
    Vote,
    VoteCreate,
    BatchVoteCreate,
    BatchVoteResult,
    MIN_VIBE,
    MAX_VIBE,
)
from app.models.movie import (
    Movie,
    MovieCreate,
    MovieUpdate,
    MatchInfo,
)
from app.models.appeal import (
    AppealRecord,
    AppealResult,
    AppealUpdateResponse,
    RankedAppeal,
    VotingStats,
)
from app.models.matching import (
    MatchCandidate,
    MatchConfig,
    MatchRequest,
    MatchResult,
    MatchTarget,
    MatchType,
    SearchResponse,
    SimilarityWeights,
    MOVIE_TITLE_WEIGHTS,
    GENERIC_WEIGHTS,
)

__all__ = [
    # Vote models
    "Vote",
    "VoteCreate",
    "BatchVoteCreate",
    "BatchVoteResult",
    "MIN_VIBE",
    "MAX_VIBE",
    # Movie models
    "Movie",
    "MovieCreate",
    "MovieUpdate",
    "MatchInfo",
    # Appeal models
    "AppealRecord",
    "AppealResult",
    "AppealUpdateResponse",
    "RankedAppeal",
    "VotingStats",
    # Matching models
    "MatchCandidate",
    "MatchConfig",
    "MatchRequest",
    "MatchResult",
    "MatchTarget",
    "MatchType",
    "SearchResponse",
    "SimilarityWeights",
    "MOVIE_TITLE_WEIGHTS",
    "GENERIC_WEIGHTS",
]
