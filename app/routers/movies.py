"""Movie management and catalog search endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status, Query
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.database import get_database
from app.models.matching import (
    MatchRequest,
    MatchResult,
    MatchTarget,
    MatchType,
    SearchResponse,
)
from app.models.movie import Movie, MovieCreate, MovieUpdate
from app.services.external_api import MovieDetails, TMDBClient
from app.services.matching import match_title
from app.services.movies import (
    DuplicateMovieError,
    MovieMatchError,
    MovieService,
    match_config_from_settings,
)
from app.utils.helpers import validate_object_id

router = APIRouter(prefix="/movies", tags=["movies"])


def get_movie_service(db: AsyncIOMotorDatabase = Depends(get_database)) -> MovieService:
    """Dependency for movie service."""
    return MovieService(db)


@router.get("/search", response_model=SearchResponse)
async def search_movies(
    query: str = Query(..., min_length=1, max_length=200),
    year: int | None = Query(default=None, ge=1800, le=2100),
) -> SearchResponse:
    """Search the catalog by title.

    With a year, only the best match is returned along with how it was
    matched; without one, every result is returned.
    """
    client = TMDBClient()
    try:
        candidates = await client.search_by_title(query, year)
    finally:
        await client.close()

    if year is None:
        return SearchResponse(results=candidates, total_results=len(candidates))

    result = match_title(MatchTarget(title=query, year=year), candidates, match_config_from_settings())
    match_info = {
        "match_type": result.match_type.value,
        "similarity_score": result.score if result.candidate else None,
        "search_title": query,
        "search_year": year,
    }
    if result.match_type == MatchType.NONE or result.candidate is None:
        return SearchResponse(results=[], total_results=0, match_info=match_info)
    return SearchResponse(results=[result.candidate], total_results=1, match_info=match_info)


@router.post("/match", response_model=MatchResult)
async def match_candidates(request: MatchRequest) -> MatchResult:
    """Match a title against caller-supplied catalog candidates."""
    return match_title(request.target, request.candidates, match_config_from_settings())


@router.get("/details/{tmdb_id}", response_model=MovieDetails)
async def get_catalog_details(tmdb_id: int) -> MovieDetails:
    """Get catalog details for a TMDB movie, including genres and trailers."""
    client = TMDBClient()
    try:
        details = await client.get_by_id(tmdb_id)
    finally:
        await client.close()

    if details is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Movie not found in catalog",
        )
    return details


@router.get("", response_model=list[Movie])
async def list_movies(
    limit: int = Query(default=500, ge=1, le=1000),
    skip: int = Query(default=0, ge=0),
    service: MovieService = Depends(get_movie_service),
) -> list[Movie]:
    """List poll movies alphabetically."""
    return await service.list_movies(limit=limit, skip=skip)


@router.post("", response_model=Movie, status_code=status.HTTP_201_CREATED)
async def add_movie(
    movie_data: MovieCreate,
    service: MovieService = Depends(get_movie_service),
) -> Movie:
    """Add a movie by title and year, matched against the catalog."""
    try:
        return await service.add_movie(movie_data)
    except MovieMatchError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except DuplicateMovieError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    finally:
        await service.tmdb.close()


@router.get("/{movie_id}", response_model=Movie)
async def get_movie(
    movie_id: str,
    service: MovieService = Depends(get_movie_service),
) -> Movie:
    """Get a movie by ID."""
    validate_object_id(movie_id, "movie_id")
    movie = await service.get_movie(movie_id)
    if not movie:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Movie not found",
        )
    return movie


@router.patch("/{movie_id}", response_model=Movie)
async def update_movie(
    movie_id: str,
    update_data: MovieUpdate,
    service: MovieService = Depends(get_movie_service),
) -> Movie:
    """Update a movie's title or year, re-matching it in the catalog."""
    validate_object_id(movie_id, "movie_id")
    try:
        movie = await service.update_movie(movie_id, update_data)
    except MovieMatchError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except DuplicateMovieError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    finally:
        await service.tmdb.close()

    if not movie:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Movie not found",
        )
    return movie


@router.delete("/{movie_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_movie(
    movie_id: str,
    service: MovieService = Depends(get_movie_service),
) -> None:
    """Delete a movie along with its votes."""
    validate_object_id(movie_id, "movie_id")
    deleted = await service.delete_movie(movie_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Movie not found",
        )
