"""Appeal ranking endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.config import get_settings
from app.database import get_database
from app.models.appeal import AppealRecord, AppealUpdateResponse, RankedAppeal, VotingStats
from app.services.appeal import AppealService, AppealValidationError

router = APIRouter(prefix="/appeal", tags=["appeal"])


def get_appeal_service(db: AsyncIOMotorDatabase = Depends(get_database)) -> AppealService:
    """Dependency for appeal service."""
    return AppealService(db, visibility_floor=get_settings().visibility_floor)


@router.get("", response_model=list[RankedAppeal])
async def get_rankings(
    service: AppealService = Depends(get_appeal_service),
) -> list[RankedAppeal]:
    """Get movies ranked by visibility-adjusted appeal."""
    try:
        return await service.get_rankings()
    except AppealValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        )


@router.post("/update", response_model=AppealUpdateResponse)
async def update_appeal(
    service: AppealService = Depends(get_appeal_service),
) -> AppealUpdateResponse:
    """Recalculate and store appeal for every voted movie."""
    try:
        return await service.update_appeal()
    except AppealValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        )


@router.get("/stats", response_model=VotingStats)
async def get_stats(
    service: AppealService = Depends(get_appeal_service),
) -> VotingStats:
    """Get poll-wide voting statistics."""
    try:
        return await service.get_stats()
    except AppealValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        )


@router.get("/movie/{movie_id}", response_model=AppealRecord)
async def get_movie_appeal(
    movie_id: str,
    service: AppealService = Depends(get_appeal_service),
) -> AppealRecord:
    """Get the last stored appeal calculation for a movie."""
    record = await service.get_stored_appeal(movie_id)
    if not record:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No appeal calculated for this movie",
        )
    return record
