"""Helper utilities for MoviePoll."""

from bson import ObjectId
from fastapi import HTTPException, status


def validate_object_id(id_str: str, field_name: str = "id") -> ObjectId:
    """Validate and convert string to ObjectId.

    Raises HTTPException 400 if invalid.
    """
    if not ObjectId.is_valid(id_str):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {field_name} format",
        )
    return ObjectId(id_str)


def object_id_or_none(id_str: str) -> ObjectId | None:
    """Convert a string to ObjectId, returning None when it is malformed."""
    if not ObjectId.is_valid(id_str):
        return None
    return ObjectId(id_str)
