"""Services for MoviePoll."""

from app.services.voting import VotingService
from app.services.movies import MovieService
from app.services.appeal import AppealService, compute_appeal, rank_appeal
from app.services.matching import match_title
from app.services.external_api import TMDBClient

__all__ = [
    "VotingService",
    "MovieService",
    "AppealService",
    "TMDBClient",
    "compute_appeal",
    "rank_appeal",
    "match_title",
]
