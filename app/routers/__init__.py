"""API routers for MoviePoll."""

from app.routers.movies import router as movies_router
from app.routers.voting import router as voting_router
from app.routers.appeal import router as appeal_router

__all__ = [
    "movies_router",
    "voting_router",
    "appeal_router",
]
