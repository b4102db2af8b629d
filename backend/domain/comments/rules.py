from __future__ import annotations

from typing import Any, Optional

from domain.comments.comment import Comment
from domain.errors import NotFoundOrUnauthorizedError, ValidationError

MAX_COMMENT_CHARS = 1000


def comment_length(content: str) -> int:
    """Length in UTF-16 code units, the unit browsers count in a textarea."""
    return len(content.encode("utf-16-le", "surrogatepass")) // 2


def validate_content(content: Any) -> str:
    """Return the trimmed comment text or raise ValidationError.

    Emptiness is checked after trimming; the length limit applies to the text
    as submitted, counted in UTF-16 code units (an emoji counts twice).
    """
    if content is None:
        raise ValidationError("comment cannot be empty")
    if not isinstance(content, str):
        raise ValidationError("comment content must be a string")
    text = content.strip()
    if not text:
        raise ValidationError("comment cannot be empty")
    if comment_length(content) > MAX_COMMENT_CHARS:
        raise ValidationError(f"comment must be at most {MAX_COMMENT_CHARS} characters")
    return text


def ensure_owner(comment: Optional[Comment], user_id: str) -> Comment:
    # Missing and foreign comments look the same to the caller.
    if comment is None or comment.user_id != str(user_id):
        raise NotFoundOrUnauthorizedError("comment not found or not authorized")
    return comment
