from application.comments.comment_service import CommentService

__all__ = ["CommentService"]
