from __future__ import annotations

from typing import Any, Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from pydantic import BaseModel, Field

from application.comments import CommentService
from domain.comments import Comment
from domain.errors import NotFoundOrUnauthorizedError
from server.api.rest.dependencies import get_comment_service

router = APIRouter(prefix="/api/v1", tags=["comments-v1"])


class CommentCreateRequest(BaseModel):
    user_id: str = Field(..., description="用户ID")
    movie_id: Optional[int] = Field(default=None, description="TMDB 电影ID")
    content: Any = Field(default=None, description="评论内容（最多 1000 字符）")


class CommentUpdateRequest(BaseModel):
    user_id: str = Field(..., description="用户ID")
    content: Any = Field(default=None, description="评论内容（最多 1000 字符）")


def _comment_to_dict(c: Comment) -> Dict[str, Any]:
    return {
        "id": str(c.id),
        "user_id": c.user_id,
        "movie_id": c.movie_id,
        "content": c.content,
        "created_at": c.created_at,
        "updated_at": c.updated_at,
    }


def _parse_comment_id(comment_id: str) -> UUID:
    try:
        return UUID(comment_id)
    except ValueError:
        # An id that cannot exist is reported like any other missing comment.
        raise NotFoundOrUnauthorizedError("comment not found or not authorized")


@router.get("/comments")
async def list_comments(
    movie_id: str = Query(..., description="TMDB 电影ID"),
    service: CommentService = Depends(get_comment_service),
) -> List[Dict[str, Any]]:
    return [_comment_to_dict(c) for c in await service.list_comments(movie_id=movie_id)]


@router.post("/comments", status_code=201)
async def create_comment(
    req: CommentCreateRequest,
    service: CommentService = Depends(get_comment_service),
) -> Dict[str, Any]:
    comment = await service.create_comment(user_id=req.user_id, movie_id=req.movie_id, content=req.content)
    return _comment_to_dict(comment)


@router.put("/comments/{comment_id}")
async def update_comment(
    comment_id: str,
    req: CommentUpdateRequest,
    service: CommentService = Depends(get_comment_service),
) -> Dict[str, Any]:
    comment = await service.update_comment(
        comment_id=_parse_comment_id(comment_id),
        user_id=req.user_id,
        content=req.content,
    )
    return _comment_to_dict(comment)


@router.delete("/comments/{comment_id}", status_code=204, response_class=Response)
async def delete_comment(
    comment_id: str,
    user_id: str = Query(..., description="用户ID"),
    service: CommentService = Depends(get_comment_service),
) -> Response:
    await service.delete_comment(comment_id=_parse_comment_id(comment_id), user_id=user_id)
    return Response(status_code=204)
