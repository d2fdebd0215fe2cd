"""Utility functions for MoviePoll."""

from app.utils.helpers import validate_object_id, object_id_or_none
from app.utils.text import normalize_title, split_words, significant_words, release_year

__all__ = [
    "validate_object_id",
    "object_id_or_none",
    "normalize_title",
    "split_words",
    "significant_words",
    "release_year",
]
