"""Text helpers shared by the title matcher and the catalog client."""

import re

ARTICLES = frozenset({"the", "a", "an"})

STOPWORDS = frozenset({
    "the", "a", "an", "and", "of", "in", "on", "at", "to", "for", "with",
    "from", "by", "part", "vol", "volume", "chapter",
})

_PUNCTUATION = re.compile(r"[^\w\s-]")
_LOOSE_HYPHEN = re.compile(r"(?<![^\W_])-|-(?![^\W_])")
_WHITESPACE = re.compile(r"\s+")
_WORD_DELIMITERS = re.compile(r"[\s_-]+")


def normalize_title(title: str) -> str:
    """Normalize a title for comparison.

    Lowercases, drops punctuation other than hyphens inside words, collapses
    whitespace and strips articles from both ends. A title made only of
    articles is returned without stripping them.
    """
    text = title.lower().strip()
    text = _PUNCTUATION.sub("", text)
    text = _LOOSE_HYPHEN.sub(" ", text)
    text = _WHITESPACE.sub(" ", text).strip()

    words = text.split(" ") if text else []
    start, end = 0, len(words)
    while start < end and words[start] in ARTICLES:
        start += 1
    while end > start and words[end - 1] in ARTICLES:
        end -= 1
    if start == end:
        return text
    return " ".join(words[start:end])


def split_words(text: str) -> list[str]:
    """Split on whitespace, underscores and hyphens, dropping empty pieces."""
    return [word for word in _WORD_DELIMITERS.split(text) if word]


def significant_words(title: str) -> set[str]:
    """Words of a normalized title that are long enough to identify it."""
    return {
        word
        for word in split_words(normalize_title(title))
        if len(word) > 2 and word not in STOPWORDS
    }


def release_year(release_date: str | None) -> int | None:
    """Extract the year from a TMDB ``YYYY-MM-DD`` release date."""
    if release_date and len(release_date) >= 4 and release_date[:4].isdigit():
        return int(release_date[:4])
    return None
