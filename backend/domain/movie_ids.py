from __future__ import annotations

from typing import Any

from domain.errors import ValidationError


def require_positive_int(value: Any, *, message: str) -> int:
    """Coerce catalog ids and page numbers (query strings included)."""
    if isinstance(value, bool):
        raise ValidationError(message)
    try:
        out = int(value)
    except (TypeError, ValueError):
        raise ValidationError(message)
    if out <= 0:
        raise ValidationError(message)
    return out


def require_movie_id(value: Any) -> int:
    return require_positive_int(value, message="movie id is required")
