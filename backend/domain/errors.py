"""Error taxonomy shared by the domain, application and server layers.

Every error carries a short human-readable message that the HTTP layer can
return verbatim.
"""

from __future__ import annotations


class DomainError(Exception):
    """Base class for expected, user-facing failures."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(DomainError, ValueError):
    """Missing or malformed input (date, rating, comment content...)."""


class NotFoundOrUnauthorizedError(DomainError):
    """Record absent, in the wrong state, or owned by someone else.

    All three cases share one message so other users' records stay invisible.
    """


class ConflictError(DomainError):
    """Duplicate entry (e.g. a movie already on the user's watchlist)."""


class UpstreamError(DomainError):
    """The external movie catalog failed or is not configured."""


__all__ = [
    "ConflictError",
    "DomainError",
    "NotFoundOrUnauthorizedError",
    "UpstreamError",
    "ValidationError",
]
