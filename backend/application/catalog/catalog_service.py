from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from application.ports.movie_catalog_port import MovieCatalogPort
from domain.movie_ids import require_positive_int


class CatalogService:
    """Thin read-through facade over the external catalog."""

    def __init__(self, *, catalog: MovieCatalogPort, recommendations_limit: int = 6) -> None:
        self._catalog = catalog
        self._recommendations_limit = int(recommendations_limit)

    async def search(self, *, query: Optional[str], page: Any = 1, genre_id: Any = None) -> Dict[str, Any]:
        gid = require_positive_int(genre_id, message="invalid genre id") if genre_id is not None else None
        return await self._catalog.search_movies(
            query=(query or "").strip(),
            page=require_positive_int(page, message="invalid page"),
            genre_id=gid,
        )

    async def movie(self, *, movie_id: Any) -> Dict[str, Any]:
        return await self._catalog.get_movie(movie_id=require_positive_int(movie_id, message="invalid movie id"))

    async def genres(self) -> List[Dict[str, Any]]:
        return await self._catalog.list_genres()

    async def by_genre(self, *, genre_id: Any, page: Any = 1) -> Dict[str, Any]:
        return await self._catalog.movies_by_genre(
            genre_id=require_positive_int(genre_id, message="invalid genre id"),
            page=require_positive_int(page, message="invalid page"),
        )

    async def popular(self) -> Dict[str, Any]:
        # The "popular" shelf is backed by the top-rated list.
        return await self._catalog.top_rated(page=1)

    async def recommendations(self, *, exclude_ids: Iterable[int] = ()) -> Dict[str, Any]:
        """Top-rated movies the user has not listed yet."""
        excluded = {int(i) for i in exclude_ids}
        payload = await self._catalog.top_rated(page=1)
        results = [m for m in (payload.get("results") or []) if isinstance(m, dict) and m.get("id") not in excluded]
        picked = results[: self._recommendations_limit]
        return {"results": picked, "total_results": len(picked)}

    async def close(self) -> None:
        await self._catalog.close()
