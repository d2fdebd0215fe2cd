"""Vote models for MoviePoll."""

from datetime import datetime
from pydantic import BaseModel, Field

MIN_VIBE = 1
MAX_VIBE = 6


class VoteCreate(BaseModel):
    """Model for creating/updating a vote.

    Vibes 1-3 rate a movie the voter has seen, 4-6 rate interest in one
    they have not. Only the range is enforced here.
    """
    movie_id: str = Field(..., min_length=1)
    user_name: str = Field(..., min_length=1, max_length=50)
    vibe: int = Field(..., ge=MIN_VIBE, le=MAX_VIBE)
    seen: bool


class Vote(BaseModel):
    """Vote model as read from the store.

    Not range-checked, so that appeal calculation can reject bad rows
    instead of failing on load.
    """
    movie_id: str
    user_name: str
    vibe: int
    seen: bool
    created_at: datetime
    updated_at: datetime


class BatchVoteCreate(BaseModel):
    """Several votes submitted at once.

    Entries are validated one by one so a bad entry does not sink the batch.
    """
    votes: list[dict]


class BatchVoteResult(BaseModel):
    """Outcome of a batch vote submission."""
    success: bool
    submitted_count: int = 0
    failed_count: int = 0
    errors: list[str] = Field(default_factory=list)
