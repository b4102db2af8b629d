from domain.comments.comment import Comment
from domain.comments.rules import MAX_COMMENT_CHARS, comment_length, ensure_owner, validate_content

__all__ = ["Comment", "MAX_COMMENT_CHARS", "comment_length", "ensure_owner", "validate_content"]
