"""Voting API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.database import get_database
from app.models.vote import BatchVoteCreate, BatchVoteResult, Vote, VoteCreate
from app.services.voting import VotingService

router = APIRouter(prefix="/votes", tags=["voting"])


def get_voting_service(db: AsyncIOMotorDatabase = Depends(get_database)) -> VotingService:
    """Dependency for voting service."""
    return VotingService(db)


@router.post("", response_model=Vote, status_code=status.HTTP_201_CREATED)
async def cast_vote(
    vote_data: VoteCreate,
    service: VotingService = Depends(get_voting_service),
) -> Vote:
    """Cast or replace a vote on a movie.

    A repeat vote from the same user replaces their previous one.
    """
    try:
        return await service.vote(vote_data)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


@router.post("/batch", response_model=BatchVoteResult)
async def cast_batch_votes(
    batch: BatchVoteCreate,
    service: VotingService = Depends(get_voting_service),
) -> BatchVoteResult:
    """Cast several votes at once; invalid entries are reported, not fatal."""
    return await service.batch_vote(batch.votes)


@router.get("", response_model=list[Vote])
async def list_votes(
    service: VotingService = Depends(get_voting_service),
) -> list[Vote]:
    """List every vote in the poll."""
    return await service.list_votes()


@router.get("/voters", response_model=list[str])
async def list_voters(
    service: VotingService = Depends(get_voting_service),
) -> list[str]:
    """List the names of everyone who has voted."""
    return await service.get_voter_names()


@router.get("/movie/{movie_id}", response_model=list[Vote])
async def get_movie_votes(
    movie_id: str,
    service: VotingService = Depends(get_voting_service),
) -> list[Vote]:
    """Get all votes for a movie."""
    return await service.list_votes(movie_id)


@router.get("/user/{user_name}", response_model=dict[str, Vote])
async def get_user_votes(
    user_name: str,
    service: VotingService = Depends(get_voting_service),
) -> dict[str, Vote]:
    """Get all of a user's votes, keyed by movie id."""
    return await service.get_user_votes(user_name)


@router.get("/{movie_id}/{user_name}", response_model=Vote)
async def get_vote(
    movie_id: str,
    user_name: str,
    service: VotingService = Depends(get_voting_service),
) -> Vote:
    """Get a user's vote on a movie."""
    vote = await service.get_vote(movie_id, user_name)
    if not vote:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Vote not found",
        )
    return vote


@router.delete("/{movie_id}/{user_name}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_vote(
    movie_id: str,
    user_name: str,
    service: VotingService = Depends(get_voting_service),
) -> None:
    """Remove a user's vote from a movie."""
    removed = await service.remove_vote(movie_id, user_name)
    if not removed:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Vote not found",
        )
