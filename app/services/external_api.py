"""External API client for movie metadata."""

from dataclasses import dataclass, field
from typing import Any
import httpx
import logging

from app.config import get_settings
from app.models.matching import MatchCandidate
from app.utils.text import release_year

logger = logging.getLogger(__name__)

# Native and romanized titles TMDB knows some well-known films by.
ALTERNATIVE_TITLES: dict[str, list[str]] = {
    "spirited away": ["千と千尋の神隠し", "sen to chihiro no kamikakushi"],
    "my neighbor totoro": ["となりのトトロ", "tonari no totoro"],
    "princess mononoke": ["もののけ姫", "mononoke hime"],
    "kiki's delivery service": ["魔女の宅急便", "majo no takkyuubin"],
    "castle in the sky": ["天空の城ラピュタ", "tenkuu no shiro rapyuta"],
    "howl's moving castle": ["ハウルの動く城", "hauru no ugoku shiro"],
    "the wind rises": ["風立ちぬ", "kaze tachinu"],
    "ponyo": ["崖の上のポニョ", "gake no ue no ponyo"],
    "the tale of princess kaguya": ["かぐや姫の物語", "kaguyahime no monogatari"],
    "weathering with you": ["天気の子", "tenki no ko"],
    "your name": ["君の名は", "kimi no na wa"],
    "a silent voice": ["聲の形", "koe no katachi"],
}


@dataclass
class MovieDetails:
    """Full movie details from TMDB."""
    tmdb_id: int
    title: str
    original_title: str | None
    release_date: str | None
    year: int | None
    overview: str | None
    poster_path: str | None
    backdrop_path: str | None
    runtime: int | None
    genres: list[str]
    original_language: str | None = None
    popularity: float | None = None
    vote_average: float | None = None
    vote_count: int | None = None
    adult: bool = False
    video: bool = False
    videos: list[dict[str, Any]] = field(default_factory=list)


def search_queries(title: str) -> list[str]:
    """The title plus any alternative titles it is known by."""
    queries = [title]
    lowered = title.lower().strip()
    for known, alternatives in ALTERNATIVE_TITLES.items():
        if lowered == known or (len(lowered) > 3 and (lowered in known or known in lowered)):
            for alternative in alternatives:
                if alternative not in queries:
                    queries.append(alternative)
    return queries


class TMDBClient:
    """Client for The Movie Database API.

    Supplies search candidates for title matching and movie details
    for storing matched movies.
    """

    def __init__(self, api_key: str | None = None, base_url: str | None = None):
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.tmdb_api_key
        self.base_url = base_url or settings.tmdb_base_url
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=10.0,
                params={"api_key": self.api_key},
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def search_by_title(self, title: str, year: int | None = None) -> list[MatchCandidate]:
        """Search for movies by title.

        Queries the title and its alternative titles, returning the
        combined results without duplicates in TMDB's order. A failing
        query is logged and skipped.
        """
        if not self.api_key:
            logger.warning("TMDB API key not configured")
            return []

        client = await self._get_client()
        candidates: list[MatchCandidate] = []
        seen_ids: set[int] = set()

        for query in search_queries(title):
            params: dict[str, Any] = {"query": query, "page": 1}
            # The main query stays unfiltered so releases a year off and
            # same-titled remakes still reach the matcher.
            if year is not None and query != title:
                params["year"] = year
            try:
                response = await client.get("/search/movie", params=params)
                response.raise_for_status()
            except httpx.HTTPError as e:
                logger.error(f"TMDB search failed for '{query}': {e}")
                continue

            for item in response.json().get("results", []):
                if item.get("id") in seen_ids or not item.get("title"):
                    continue
                seen_ids.add(item["id"])
                candidates.append(MatchCandidate(**item))

        return candidates

    async def get_by_id(self, tmdb_id: int) -> MovieDetails | None:
        """Get movie details, including videos, by TMDB ID."""
        if not self.api_key:
            logger.warning("TMDB API key not configured")
            return None

        try:
            client = await self._get_client()
            response = await client.get(
                f"/movie/{tmdb_id}",
                params={"append_to_response": "videos"},
            )
            response.raise_for_status()
            return self._parse_details(response.json())

        except httpx.HTTPError as e:
            logger.error(f"TMDB get movie failed: {e}")
            return None

    def _parse_details(self, movie: dict[str, Any]) -> MovieDetails:
        """Parse movie details from a TMDB response."""
        release_date = movie.get("release_date") or None
        videos = [
            {
                "key": video.get("key"),
                "name": video.get("name"),
                "site": video.get("site"),
                "type": video.get("type"),
                "official": video.get("official"),
            }
            for video in (movie.get("videos") or {}).get("results", [])
        ]

        return MovieDetails(
            tmdb_id=movie["id"],
            title=movie["title"],
            original_title=movie.get("original_title") or movie["title"],
            release_date=release_date,
            year=release_year(release_date),
            overview=movie.get("overview"),
            poster_path=movie.get("poster_path"),
            backdrop_path=movie.get("backdrop_path"),
            runtime=movie.get("runtime"),
            genres=[g["name"] for g in movie.get("genres", [])],
            original_language=movie.get("original_language") or "en",
            popularity=movie.get("popularity"),
            vote_average=movie.get("vote_average"),
            vote_count=movie.get("vote_count"),
            adult=bool(movie.get("adult")),
            video=bool(movie.get("video")),
            videos=videos,
        )
