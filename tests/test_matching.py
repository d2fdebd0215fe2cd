"""Tests for fuzzy title matching."""

import math
import pytest
from httpx import AsyncClient

from app.models.matching import (
    GENERIC_WEIGHTS,
    MatchCandidate,
    MatchConfig,
    MatchTarget,
    MatchType,
)
from app.services.matching import (
    edit_distance,
    length_delta,
    match_title,
    title_similarity,
    word_distance,
)
from app.utils.text import normalize_title, release_year, significant_words, split_words


def candidate(id: int, title: str, release_date: str | None = None, original_title: str | None = None):
    return MatchCandidate(
        id=id,
        title=title,
        original_title=original_title,
        release_date=release_date,
    )


class TestNormalization:
    """Tests for title normalization helpers."""

    @pytest.mark.parametrize("title,expected", [
        ("The Matrix", "matrix"),
        ("Matrix, The", "matrix"),
        ("  Spider-Man:  Homecoming ", "spider-man homecoming"),
        ("Star Wars - A New Hope", "star wars a new hope"),
        ("A Quiet Place", "quiet place"),
        ("Kiki's Delivery Service", "kikis delivery service"),
        ("Mission: Impossible", "mission impossible"),
        ("An American in Paris", "american in paris"),
        ("The", "the"),
    ])
    def test_normalize_title(self, title: str, expected: str):
        """Test lowercasing, punctuation, whitespace and article stripping."""
        assert normalize_title(title) == expected

    def test_articles_inside_title_are_kept(self):
        """Test that only leading and trailing articles are stripped."""
        assert normalize_title("Once Upon a Time in the West") == "once upon a time in the west"

    def test_split_words(self):
        """Test splitting on spaces, underscores and hyphens."""
        assert split_words("spider-man_far  from") == ["spider", "man", "far", "from"]
        assert split_words("") == []

    def test_significant_words(self):
        """Test that short words and stopwords are dropped."""
        assert significant_words("The Lord of the Rings") == {"lord", "rings"}
        assert significant_words("Up") == set()

    @pytest.mark.parametrize("release_date,expected", [
        ("1982-06-25", 1982),
        ("2011", 2011),
        ("", None),
        (None, None),
        ("TBA", None),
    ])
    def test_release_year(self, release_date, expected):
        """Test extracting a year from a release date."""
        assert release_year(release_date) == expected


class TestDistances:
    """Tests for the underlying distance metrics."""

    def test_edit_distance_classic(self):
        """Test the textbook example."""
        assert edit_distance("kitten", "sitting") == 3

    @pytest.mark.parametrize("s", ["", "a", "alien", "the thing from another world"])
    def test_edit_distance_identity(self, s: str):
        """Test that a string is at distance zero from itself."""
        assert edit_distance(s, s) == 0

    def test_edit_distance_empty(self):
        """Test distance to an empty string is its length."""
        assert edit_distance("", "abc") == 3
        assert edit_distance("abc", "") == 3

    def test_edit_distance_symmetric(self):
        """Test that distance does not depend on argument order."""
        assert edit_distance("inception", "interstellar") == edit_distance("interstellar", "inception")

    def test_word_distance_ignores_order(self):
        """Test that reordered words are a perfect word match."""
        assert word_distance("star wars", "wars star") == 0

    def test_word_distance_rewards_shared_words(self):
        """Test that a title contained in a longer one scores zero."""
        assert word_distance("alien", "alien resurrection") == 0
        assert word_distance("alien", "aliens") == 1

    def test_word_distance_sums_per_word(self):
        """Test that each word contributes its closest distance."""
        assert word_distance("cat dgo", "cat dog") == 2

    def test_length_delta(self):
        """Test the absolute length difference."""
        assert length_delta("abc", "a") == 2
        assert length_delta("a", "abc") == 2


class TestTitleSimilarity:
    """Tests for the weighted similarity score."""

    def test_identical_strings_score_zero(self):
        """Test that identical titles score zero."""
        assert title_similarity("matrix", "matrix") == 0

    def test_movie_weights(self):
        """Test the movie-tuned weighting for a one-letter difference."""
        # phrase 0.6, words 1.2 -> 0.6 * 8 + 1.2 * 1.5
        assert title_similarity("ab", "ac") == pytest.approx(6.6)

    def test_generic_weights(self):
        """Test the generic weighting for a one-letter difference."""
        # phrase 0.5, words 1.0 -> 0.5 * 10 + 1.0 * 1
        assert title_similarity("ab", "ac", GENERIC_WEIGHTS) == pytest.approx(6.0)

    def test_subtitle_scores_better_than_unrelated(self):
        """Test that sharing words beats sharing nothing."""
        sequel = title_similarity("alien", "alien resurrection")
        unrelated = title_similarity("alien", "frozen")
        assert sequel < unrelated


class TestMatchTitle:
    """Tests for match_title classification."""

    def test_empty_candidates(self):
        """Test that no candidates means no match."""
        result = match_title(MatchTarget(title="Inception", year=2010), [])

        assert result.match_type == MatchType.NONE
        assert result.candidate is None
        assert math.isinf(result.score)

    def test_exact_match_prefers_same_year(self):
        """Test that the original is chosen over a same-titled remake."""
        candidates = [
            candidate(60935, "The Thing", "2011-10-14"),
            candidate(1091, "The Thing", "1982-06-25"),
        ]

        result = match_title(MatchTarget(title="The Thing", year=1982), candidates)

        assert result.match_type == MatchType.EXACT
        assert result.score == 0
        assert result.candidate.id == 1091

    def test_exact_match_without_year(self):
        """Test that without a year the first exact title wins."""
        candidates = [
            candidate(1, "Solaris", "2002-11-27"),
            candidate(2, "Solaris", "1972-03-20"),
        ]

        result = match_title(MatchTarget(title="solaris"), candidates)

        assert result.match_type == MatchType.EXACT
        assert result.candidate.id == 1

    def test_exact_match_after_normalization(self):
        """Test that punctuation and articles do not prevent an exact match."""
        result = match_title(
            MatchTarget(title="Mission Impossible", year=1996),
            [candidate(954, "Mission: Impossible", "1996-05-22")],
        )

        assert result.match_type == MatchType.EXACT
        assert result.candidate.id == 954

    def test_exact_match_on_original_title(self):
        """Test that the original title can match too."""
        result = match_title(
            MatchTarget(title="Spirited Away", year=2001),
            [candidate(129, "The Vanishing of Chihiro", "2001-07-20", original_title="Spirited Away")],
        )

        assert result.match_type == MatchType.EXACT
        assert result.candidate.id == 129

    def test_adjacent_year_beats_remake(self):
        """Test that a release a year off beats a remake decades away."""
        candidates = [
            candidate(60935, "The Thing", "2011-10-14"),
            candidate(1091, "The Thing", "1981-12-31"),
        ]

        result = match_title(MatchTarget(title="The Thing", year=1982), candidates)

        assert result.match_type == MatchType.FLEXIBLE
        assert result.score == 0
        assert result.candidate.id == 1091

    def test_wrong_year_only_is_penalized(self):
        """Test that a same-titled film from another era is penalized but still found."""
        result = match_title(
            MatchTarget(title="The Thing", year=1982),
            [candidate(60935, "The Thing", "2011-10-14")],
        )

        assert result.match_type == MatchType.FLEXIBLE
        assert result.score == pytest.approx(10.0)
        assert result.candidate.id == 60935

    def test_flexible_match_on_typo(self):
        """Test that a transposed letter is a flexible match."""
        result = match_title(
            MatchTarget(title="Inceptoin", year=2010),
            [
                candidate(27205, "Inception", "2010-07-15"),
                candidate(64956, "Inception: The Cobol Job", "2010-12-07"),
            ],
        )

        assert result.match_type == MatchType.FLEXIBLE
        assert result.candidate.id == 27205
        assert result.score == pytest.approx(13.2)

    def test_fallback_on_shared_word(self):
        """Test that a long subtitle falls back on shared significant words."""
        result = match_title(
            MatchTarget(title="Star Wars", year=1977),
            [candidate(11, "Star Wars: Episode IV - A New Hope", "1977-05-25")],
        )

        assert result.match_type == MatchType.FALLBACK
        assert result.candidate.id == 11
        assert result.score > 15.0

    def test_no_match(self):
        """Test that unrelated titles are not matched."""
        result = match_title(
            MatchTarget(title="Inception", year=2010),
            [candidate(109445, "Frozen", "2013-11-20")],
        )

        assert result.match_type == MatchType.NONE
        assert result.candidate is None
        assert result.score > 15.0

    def test_missing_release_date_is_penalized(self):
        """Test that a dated candidate beats an undated one with the same title."""
        candidates = [
            candidate(1, "Heat"),
            candidate(2, "Heat", "1995-12-15"),
        ]

        result = match_title(MatchTarget(title="Heat", year=1995), candidates)

        assert result.candidate.id == 2
        assert result.match_type == MatchType.EXACT

    def test_custom_threshold(self):
        """Test that a stricter threshold demotes a typo match to fallback."""
        config = MatchConfig(flexible_threshold=5.0)

        result = match_title(
            MatchTarget(title="Inceptoin Dreams", year=2010),
            [candidate(1, "Inception Dreams", "2010-01-01")],
            config,
        )

        assert result.match_type == MatchType.FALLBACK
        assert result.candidate.id == 1


class TestMatchAPI:
    """Tests for the match endpoint, which needs no database."""

    async def test_match_endpoint(self, api_client: AsyncClient):
        """Test POST /api/movies/match endpoint."""
        response = await api_client.post(
            "/api/movies/match",
            json={
                "target": {"title": "The Thing", "year": 1982},
                "candidates": [
                    {"id": 60935, "title": "The Thing", "release_date": "2011-10-14"},
                    {"id": 1091, "title": "The Thing", "release_date": "1982-06-25"},
                ],
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["match_type"] == "exact"
        assert data["candidate"]["id"] == 1091
        assert data["score"] == 0

    async def test_match_endpoint_no_candidates(self, api_client: AsyncClient):
        """Test that an empty candidate list returns none with no score."""
        response = await api_client.post(
            "/api/movies/match",
            json={"target": {"title": "Inception"}},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["match_type"] == "none"
        assert data["candidate"] is None
        assert data["score"] is None
