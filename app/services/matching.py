"""Fuzzy movie title matching against catalog search results.

Similarity follows the Levenshtein-based phrase/word scoring commonly used
for noisy name lookups: the whole-string distance and the word-by-word
distance are weighted, the smaller of the two dominates, and a small length
term is added. Lower scores mean closer titles.
"""

import math
from collections.abc import Sequence

from app.models.matching import (
    MatchCandidate,
    MatchConfig,
    MatchResult,
    MatchTarget,
    MatchType,
    SimilarityWeights,
    MOVIE_TITLE_WEIGHTS,
)
from app.utils.text import normalize_title, release_year, significant_words, split_words

DEFAULT_MATCH_CONFIG = MatchConfig()


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance: insertions, deletions and substitutions cost 1."""
    rows, cols = len(a) + 1, len(b) + 1
    d = [[0] * cols for _ in range(rows)]
    for i in range(rows):
        d[i][0] = i
    for j in range(cols):
        d[0][j] = j

    for i in range(1, rows):
        for j in range(1, cols):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            d[i][j] = min(
                d[i - 1][j] + 1,
                d[i][j - 1] + 1,
                d[i - 1][j - 1] + cost,
            )
    return d[-1][-1]


def word_distance(a: str, b: str) -> int:
    """Sum over the words of a of the closest edit distance to a word of b."""
    words_b = split_words(b)
    total = 0
    for word_a in split_words(a):
        best = len(b)
        for word_b in words_b:
            distance = edit_distance(word_a, word_b)
            if distance < best:
                best = distance
            if distance == 0:
                break
        total += best
    return total


def length_delta(a: str, b: str) -> int:
    return abs(len(a) - len(b))


def title_similarity(
    a: str,
    b: str,
    weights: SimilarityWeights = MOVIE_TITLE_WEIGHTS,
) -> float:
    """Weighted similarity score of two strings, lower is closer."""
    phrase_score = weights.phrase_weight * edit_distance(a, b)
    words_score = weights.words_weight * word_distance(a, b)
    return (
        min(phrase_score, words_score) * weights.min_weight
        + max(phrase_score, words_score) * weights.max_weight
        + weights.length_weight * length_delta(a, b)
    )


def _candidate_titles(candidate: MatchCandidate) -> list[str]:
    titles = [normalize_title(candidate.title)]
    if candidate.original_title:
        original = normalize_title(candidate.original_title)
        if original not in titles:
            titles.append(original)
    return titles


def _year_gap(target_year: int | None, candidate: MatchCandidate) -> float:
    if target_year is None:
        return 0
    year = release_year(candidate.release_date)
    if year is None:
        return math.inf
    return abs(year - target_year)


def match_title(
    target: MatchTarget,
    candidates: Sequence[MatchCandidate],
    config: MatchConfig = DEFAULT_MATCH_CONFIG,
) -> MatchResult:
    """Pick the candidate most likely to be the target movie.

    - exact: a normalized title or original title equals the target's, with
      the same release year when the target year is known
    - flexible: best weighted score within config.flexible_threshold
    - fallback: best candidate shares a significant word with the target
    - none: no candidate is close enough; candidate is None

    When the target year is known, candidates released more than
    config.year_tolerance years away (or with no release date) get
    config.year_penalty added, and equal scores go to the closer year.
    """
    if not candidates:
        return MatchResult(candidate=None, score=math.inf, match_type=MatchType.NONE)

    target_title = normalize_title(target.title)
    normalized = [_candidate_titles(candidate) for candidate in candidates]

    for candidate, titles in zip(candidates, normalized):
        if target_title in titles and _year_gap(target.year, candidate) == 0:
            return MatchResult(candidate=candidate, score=0.0, match_type=MatchType.EXACT)

    best_key = None
    best_index = 0
    for index, (candidate, titles) in enumerate(zip(candidates, normalized)):
        score = min(title_similarity(target_title, title, config.weights) for title in titles)
        gap = _year_gap(target.year, candidate)
        if gap > config.year_tolerance:
            score += config.year_penalty
        key = (score, gap, index)
        if best_key is None or key < best_key:
            best_key = key
            best_index = index

    best_score = best_key[0]
    best = candidates[best_index]

    if best_score <= config.flexible_threshold:
        return MatchResult(candidate=best, score=best_score, match_type=MatchType.FLEXIBLE)

    target_words = significant_words(target.title)
    best_words = significant_words(best.title)
    if best.original_title:
        best_words |= significant_words(best.original_title)
    if target_words & best_words:
        return MatchResult(candidate=best, score=best_score, match_type=MatchType.FALLBACK)

    return MatchResult(candidate=None, score=best_score, match_type=MatchType.NONE)
