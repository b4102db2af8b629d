from __future__ import annotations

from datetime import date, tzinfo
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from pydantic import BaseModel, ConfigDict, Field

from application.comments import CommentService
from application.watchlist import WatchlistService
from config.settings import WATCHLIST_UPCOMING_LIMIT
from domain.watchlist import ClassifiedRecord, classify
from server.api.rest.dependencies import (
    get_comment_service,
    get_reference_day,
    get_viewer_timezone,
    get_watchlist_service,
)

router = APIRouter(prefix="/api/v1", tags=["watchlist-v1"])


class WatchlistAddRequest(BaseModel):
    user_id: str = Field(..., description="用户ID")
    movie_id: Optional[int] = Field(default=None, description="TMDB 电影ID")
    title: Optional[str] = Field(default=None, description="电影标题")
    poster_url: Optional[str] = Field(default=None, description="海报地址（可选）")
    release_date: Optional[str] = Field(default=None, description="上映日期（可选，原样保存）")


class WatchDateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., description="用户ID")
    on: Optional[str] = Field(
        default=None,
        alias="date",
        description="观看日期：YYYY-MM-DD（本地日）或 ISO 时间戳",
    )


class UnwatchRequest(BaseModel):
    user_id: str = Field(..., description="用户ID")


class RatingRequest(BaseModel):
    user_id: str = Field(..., description="用户ID")
    # Validated by the domain so out-of-range and non-integer values get the same 400.
    rating: Any = Field(..., description="评分 1-5，null 表示清除")


def _record_to_dict(item: ClassifiedRecord) -> Dict[str, Any]:
    r = item.record
    return {
        "id": str(r.id),
        "movie_id": r.movie_id,
        "title": r.title,
        "poster_url": r.poster_url,
        "release_date": r.release_date,
        "watched": r.watched,
        "date": r.occurs_on.isoformat() if r.occurs_on else None,
        "rating": r.rating,
        "status": item.state.status.value,
        "created_at": r.created_at,
        "updated_at": r.updated_at,
    }


def _days(days: List[date]) -> List[str]:
    return [d.isoformat() for d in days]


@router.get("/watchlist")
async def list_watchlist(
    user_id: str = Query(..., description="用户ID"),
    today: date = Depends(get_reference_day),
    viewer_tz: tzinfo = Depends(get_viewer_timezone),
    service: WatchlistService = Depends(get_watchlist_service),
) -> List[Dict[str, Any]]:
    items = await service.list_movies(user_id=user_id, today=today, tz=viewer_tz)
    return [_record_to_dict(i) for i in items]


@router.post("/watchlist", status_code=201)
async def add_to_watchlist(
    req: WatchlistAddRequest,
    today: date = Depends(get_reference_day),
    viewer_tz: tzinfo = Depends(get_viewer_timezone),
    service: WatchlistService = Depends(get_watchlist_service),
) -> Dict[str, Any]:
    record = await service.add_movie(
        user_id=req.user_id,
        movie_id=req.movie_id,
        title=req.title,
        poster_url=req.poster_url,
        release_date=req.release_date,
    )
    return _record_to_dict(ClassifiedRecord(record=record, state=classify(record, today, viewer_tz)))


@router.delete("/watchlist/{movie_id}", status_code=204, response_class=Response)
async def remove_from_watchlist(
    movie_id: str,
    user_id: str = Query(..., description="用户ID"),
    service: WatchlistService = Depends(get_watchlist_service),
) -> Response:
    await service.remove_movie(user_id=user_id, movie_id=movie_id)
    return Response(status_code=204)


@router.get("/watchlist/overview")
async def watchlist_overview(
    user_id: str = Query(..., description="用户ID"),
    today: date = Depends(get_reference_day),
    viewer_tz: tzinfo = Depends(get_viewer_timezone),
    service: WatchlistService = Depends(get_watchlist_service),
) -> Dict[str, Any]:
    overview = await service.overview(user_id=user_id, today=today, tz=viewer_tz)
    return {
        "today": today.isoformat(),
        "to_watch": [_record_to_dict(i) for i in overview.to_watch],
        "upcoming": [_record_to_dict(i) for i in overview.upcoming],
        "watched": [_record_to_dict(i) for i in overview.watched],
        "watched_days": _days(overview.watched_days),
        "scheduled_days": _days(overview.scheduled_days),
    }


@router.get("/watchlist/upcoming")
async def upcoming_movies(
    user_id: str = Query(..., description="用户ID"),
    limit: int = Query(WATCHLIST_UPCOMING_LIMIT, ge=1, le=200),
    today: date = Depends(get_reference_day),
    viewer_tz: tzinfo = Depends(get_viewer_timezone),
    service: WatchlistService = Depends(get_watchlist_service),
) -> List[Dict[str, Any]]:
    items = await service.upcoming(user_id=user_id, today=today, tz=viewer_tz, limit=limit)
    return [_record_to_dict(i) for i in items]


@router.get("/watchlist/by-date")
async def movies_by_date(
    user_id: str = Query(..., description="用户ID"),
    day: Optional[str] = Query(default=None, alias="date", description="YYYY-MM-DD"),
    today: date = Depends(get_reference_day),
    viewer_tz: tzinfo = Depends(get_viewer_timezone),
    service: WatchlistService = Depends(get_watchlist_service),
) -> Dict[str, Any]:
    schedule = await service.day_schedule(user_id=user_id, day=day, today=today, tz=viewer_tz)
    return {
        "date": schedule.day.isoformat(),
        "watched": [_record_to_dict(i) for i in schedule.watched],
        "upcoming": [_record_to_dict(i) for i in schedule.upcoming],
    }


@router.get("/watchlist/watched-dates")
async def watched_dates(
    user_id: str = Query(..., description="用户ID"),
    today: date = Depends(get_reference_day),
    viewer_tz: tzinfo = Depends(get_viewer_timezone),
    service: WatchlistService = Depends(get_watchlist_service),
) -> List[str]:
    return _days(await service.watched_days(user_id=user_id, today=today, tz=viewer_tz))


@router.get("/watchlist/ratings")
async def watched_ratings(
    user_id: str = Query(..., description="用户ID"),
    today: date = Depends(get_reference_day),
    viewer_tz: tzinfo = Depends(get_viewer_timezone),
    service: WatchlistService = Depends(get_watchlist_service),
    comments: CommentService = Depends(get_comment_service),
) -> Dict[str, Any]:
    commented = await comments.commented_movie_ids(user_id=user_id)
    summary, watched = await service.ratings(
        user_id=user_id,
        today=today,
        tz=viewer_tz,
        commented_movie_ids=commented,
    )
    return {
        "summary": {
            "watched": summary.watched,
            "rated": summary.rated,
            "highly_rated": summary.highly_rated,
            "commented": summary.commented,
        },
        "movies": [_record_to_dict(i) for i in watched],
    }


async def _set_watch_date(
    movie_id: str,
    req: WatchDateRequest,
    today: date,
    viewer_tz: tzinfo,
    service: WatchlistService,
) -> Dict[str, Any]:
    action, item = await service.set_watch_date(
        user_id=req.user_id,
        movie_id=movie_id,
        on=req.on,
        today=today,
        tz=viewer_tz,
    )
    return {"action": action.value, "movie": _record_to_dict(item)}


@router.post("/watchlist/{movie_id}/schedule")
async def schedule_movie(
    movie_id: str,
    req: WatchDateRequest,
    today: date = Depends(get_reference_day),
    viewer_tz: tzinfo = Depends(get_viewer_timezone),
    service: WatchlistService = Depends(get_watchlist_service),
) -> Dict[str, Any]:
    return await _set_watch_date(movie_id, req, today, viewer_tz, service)


@router.post("/watchlist/{movie_id}/watched")
async def mark_watched(
    movie_id: str,
    req: WatchDateRequest,
    today: date = Depends(get_reference_day),
    viewer_tz: tzinfo = Depends(get_viewer_timezone),
    service: WatchlistService = Depends(get_watchlist_service),
) -> Dict[str, Any]:
    # Same write as scheduling; a future date simply comes back as "scheduled".
    return await _set_watch_date(movie_id, req, today, viewer_tz, service)


@router.post("/watchlist/{movie_id}/unwatch")
async def unmark_watched(
    movie_id: str,
    req: UnwatchRequest,
    today: date = Depends(get_reference_day),
    viewer_tz: tzinfo = Depends(get_viewer_timezone),
    service: WatchlistService = Depends(get_watchlist_service),
) -> Dict[str, Any]:
    item = await service.unmark_watched(user_id=req.user_id, movie_id=movie_id, today=today, tz=viewer_tz)
    return _record_to_dict(item)


@router.put("/watchlist/{movie_id}/rating")
async def rate_movie(
    movie_id: str,
    req: RatingRequest,
    today: date = Depends(get_reference_day),
    viewer_tz: tzinfo = Depends(get_viewer_timezone),
    service: WatchlistService = Depends(get_watchlist_service),
) -> Dict[str, Any]:
    item = await service.rate(
        user_id=req.user_id,
        movie_id=movie_id,
        rating=req.rating,
        today=today,
        tz=viewer_tz,
    )
    return _record_to_dict(item)
