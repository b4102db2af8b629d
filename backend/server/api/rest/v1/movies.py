from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from application.catalog import CatalogService
from server.api.rest.dependencies import get_catalog_service

router = APIRouter(prefix="/api/v1", tags=["movies-v1"])


def _parse_exclude(raw: Optional[str]) -> List[int]:
    """`exclude=1,2,3` → [1, 2, 3]; unparsable pieces are ignored."""
    out: List[int] = []
    for part in (raw or "").split(","):
        part = part.strip()
        if not part:
            continue
        try:
            out.append(int(part))
        except ValueError:
            continue
    return out


@router.get("/movies/search")
async def search_movies(
    q: Optional[str] = Query(default=None, description="搜索关键词（可选）"),
    page: int = Query(1, ge=1, le=500),
    genre: Optional[int] = Query(default=None, ge=1, description="类型ID（可选）"),
    service: CatalogService = Depends(get_catalog_service),
) -> Dict[str, Any]:
    return await service.search(query=q, page=page, genre_id=genre)


@router.get("/movies/genres")
async def list_genres(service: CatalogService = Depends(get_catalog_service)) -> Dict[str, Any]:
    return {"genres": await service.genres()}


@router.get("/movies/genre/{genre_id}")
async def movies_by_genre(
    genre_id: str,
    page: int = Query(1, ge=1, le=500),
    service: CatalogService = Depends(get_catalog_service),
) -> Dict[str, Any]:
    return await service.by_genre(genre_id=genre_id, page=page)


@router.get("/movies/popular")
async def popular_movies(service: CatalogService = Depends(get_catalog_service)) -> Dict[str, Any]:
    return await service.popular()


@router.get("/movies/recommendations")
async def recommendations(
    exclude: Optional[str] = Query(default=None, description="逗号分隔的已收藏电影ID"),
    service: CatalogService = Depends(get_catalog_service),
) -> Dict[str, Any]:
    return await service.recommendations(exclude_ids=_parse_exclude(exclude))


@router.get("/movies/{movie_id}")
async def movie_details(
    movie_id: str,
    service: CatalogService = Depends(get_catalog_service),
) -> Dict[str, Any]:
    return await service.movie(movie_id=movie_id)
