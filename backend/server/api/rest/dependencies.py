from __future__ import annotations

from datetime import date, tzinfo
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Query

from application.catalog import CatalogService
from application.comments import CommentService
from application.watchlist import WatchlistService
from config.settings import APP_TIMEZONE, RECOMMENDATIONS_LIMIT
from domain.watchlist import local_today, resolve_timezone


@lru_cache(maxsize=1)
def _build_watch_record_store():
    from config.database import get_postgres_dsn
    from infrastructure.persistence.postgres.watch_record_store import build_watch_record_store

    return build_watch_record_store(dsn=get_postgres_dsn())


@lru_cache(maxsize=1)
def _build_comment_store():
    from config.database import get_postgres_dsn
    from infrastructure.persistence.postgres.comment_store import build_comment_store

    return build_comment_store(dsn=get_postgres_dsn())


@lru_cache(maxsize=1)
def _build_movie_catalog():
    from infrastructure.catalog import build_movie_catalog

    return build_movie_catalog()


@lru_cache(maxsize=1)
def _build_watchlist_service() -> WatchlistService:
    return WatchlistService(store=_build_watch_record_store())


@lru_cache(maxsize=1)
def _build_comment_service() -> CommentService:
    return CommentService(store=_build_comment_store())


@lru_cache(maxsize=1)
def _build_catalog_service() -> CatalogService:
    return CatalogService(catalog=_build_movie_catalog(), recommendations_limit=RECOMMENDATIONS_LIMIT)


def get_watchlist_service() -> WatchlistService:
    return _build_watchlist_service()


def get_comment_service() -> CommentService:
    return _build_comment_service()


def get_catalog_service() -> CatalogService:
    return _build_catalog_service()


def get_viewer_timezone(
    tz: Optional[str] = Query(default=None, description="IANA 时区（可选，默认 APP_TIMEZONE）"),
) -> tzinfo:
    return resolve_timezone(tz, default=APP_TIMEZONE)


def get_reference_day(viewer_tz: tzinfo = Depends(get_viewer_timezone)) -> date:
    """The viewer's "today"; tests override this to pin the clock."""
    return local_today(viewer_tz)


async def shutdown_dependencies() -> None:
    """Best-effort shutdown hooks for long-lived adapters (connection pools, HTTP sessions)."""
    # Only close what was actually built; cache_info() avoids constructing adapters at shutdown.
    if _build_watchlist_service.cache_info().currsize:
        await _build_watchlist_service().close()
    if _build_comment_service.cache_info().currsize:
        await _build_comment_service().close()
    if _build_catalog_service.cache_info().currsize:
        await _build_catalog_service().close()
