"""Seed the poll with movies from a JSON file, matched against TMDB.

The file holds ``{"movies": [{"title": ..., "year": ...}, ...]}``.
"""

import argparse
import asyncio
import json
from collections import Counter
from pathlib import Path

from app.database import Database
from app.models.movie import MovieCreate
from app.services.movies import DuplicateMovieError, MovieMatchError, MovieService


async def main(path: Path, delay: float) -> None:
    """Add every listed movie and report how each was matched."""
    movies = json.loads(path.read_text(encoding="utf-8")).get("movies", [])
    print(f"Found {len(movies)} movie(s) to seed")

    await Database.connect()
    service = MovieService(Database.get_db())
    stats: Counter[str] = Counter()
    try:
        for entry in movies:
            title, year = entry["title"], entry["year"]
            try:
                movie = await service.add_movie(MovieCreate(title=title, year=year))
            except MovieMatchError as e:
                stats["none"] += 1
                print(f"No match: {title} ({year}) - {e}")
            except DuplicateMovieError:
                stats["duplicate"] += 1
                print(f"Already seeded: {title} ({year})")
            else:
                match_type = movie.match_info.match_type.value if movie.match_info else "unmatched"
                stats[match_type] += 1
                print(f"{match_type}: {title} ({year}) -> {movie.title} ({movie.release_date})")

            # Stay under TMDB's rate limit
            await asyncio.sleep(delay)
    finally:
        await service.tmdb.close()
        await Database.disconnect()

    print("Match statistics:")
    for match_type in ("exact", "flexible", "fallback", "none", "duplicate"):
        print(f"  {match_type}: {stats[match_type]}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("path", type=Path)
    parser.add_argument("--delay", type=float, default=0.5)
    args = parser.parse_args()
    asyncio.run(main(args.path, args.delay))
