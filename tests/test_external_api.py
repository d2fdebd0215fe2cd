"""Tests for the TMDB catalog client."""

import respx
from httpx import Response

from app.services.external_api import TMDBClient, search_queries


class TestSearchQueries:
    """Tests for alternative title expansion."""

    def test_plain_title(self):
        """Test that an unknown title is searched as-is."""
        assert search_queries("The Thing") == ["The Thing"]

    def test_known_alternative_titles(self):
        """Test that a known film is also searched by its native titles."""
        queries = search_queries("Spirited Away")

        assert queries[0] == "Spirited Away"
        assert "千と千尋の神隠し" in queries
        assert "sen to chihiro no kamikakushi" in queries


class TestTMDBClient:
    """Tests for TMDB API client."""

    @respx.mock
    async def test_search_by_title(self, mock_tmdb_search):
        """Test searching returns every candidate in catalog order."""
        respx.get("https://api.themoviedb.org/3/search/movie").mock(
            return_value=Response(200, json=mock_tmdb_search)
        )

        client = TMDBClient(api_key="test_key")
        try:
            candidates = await client.search_by_title("The Thing", 1982)

            assert [c.id for c in candidates] == [60935, 1091, 10925]
            assert candidates[1].release_date == "1982-06-25"
            assert candidates[1].vote_average == 8.1
        finally:
            await client.close()

    @respx.mock
    async def test_search_merges_alternative_titles(self):
        """Test that results from alternative titles are merged without duplicates."""
        route = respx.get("https://api.themoviedb.org/3/search/movie").mock(
            side_effect=[
                Response(200, json={"results": [{"id": 129, "title": "Spirited Away", "release_date": "2001-07-20"}]}),
                Response(200, json={"results": [
                    {"id": 129, "title": "Spirited Away", "release_date": "2001-07-20"},
                    {"id": 999, "title": "Spirited Away Live", "release_date": "2022-02-25"},
                ]}),
                Response(200, json={"results": []}),
            ]
        )

        client = TMDBClient(api_key="test_key")
        try:
            candidates = await client.search_by_title("Spirited Away", 2001)

            assert route.call_count == 3
            assert [c.id for c in candidates] == [129, 999]

            main_params = route.calls[0].request.url.params
            assert main_params["query"] == "Spirited Away"
            assert "year" not in main_params
            alternative_params = route.calls[1].request.url.params
            assert alternative_params["query"] == "千と千尋の神隠し"
            assert alternative_params["year"] == "2001"
        finally:
            await client.close()

    @respx.mock
    async def test_search_not_found(self):
        """Test searching for a movie that doesn't exist."""
        respx.get("https://api.themoviedb.org/3/search/movie").mock(
            return_value=Response(200, json={"results": []})
        )

        client = TMDBClient(api_key="test_key")
        try:
            assert await client.search_by_title("NonexistentMovie12345") == []
        finally:
            await client.close()

    @respx.mock
    async def test_search_error_handling(self):
        """Test graceful handling of API errors."""
        respx.get("https://api.themoviedb.org/3/search/movie").mock(
            return_value=Response(500, json={"status_message": "Internal error"})
        )

        client = TMDBClient(api_key="test_key")
        try:
            assert await client.search_by_title("The Thing") == []
        finally:
            await client.close()

    async def test_no_api_key(self):
        """Test behavior when API key is not configured."""
        client = TMDBClient(api_key="")
        try:
            assert await client.search_by_title("The Thing") == []
            assert await client.get_by_id(1091) is None
        finally:
            await client.close()

    @respx.mock
    async def test_get_by_id(self, mock_tmdb_movie_details):
        """Test getting movie details by ID."""
        respx.get("https://api.themoviedb.org/3/movie/1091").mock(
            return_value=Response(200, json=mock_tmdb_movie_details)
        )

        client = TMDBClient(api_key="test_key")
        try:
            details = await client.get_by_id(1091)

            assert details is not None
            assert details.tmdb_id == 1091
            assert details.year == 1982
            assert details.runtime == 109
            assert "Horror" in details.genres
            assert details.videos[0]["site"] == "YouTube"
        finally:
            await client.close()

    @respx.mock
    async def test_get_by_id_not_found(self):
        """Test that a missing movie yields None."""
        respx.get("https://api.themoviedb.org/3/movie/1").mock(
            return_value=Response(404, json={"status_message": "Not found"})
        )

        client = TMDBClient(api_key="test_key")
        try:
            assert await client.get_by_id(1) is None
        finally:
            await client.close()
