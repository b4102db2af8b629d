"""
TMDB API HTTP client backing the movie catalog port.

The client shares one aiohttp session per process and returns TMDB payloads
unchanged, apart from adding absolute `poster_url`/`backdrop_url` fields
next to TMDB's relative image paths.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp

from application.ports.movie_catalog_port import MovieCatalogPort
from domain.errors import UpstreamError
from infrastructure.config.settings import (
    TMDB_API_KEY,
    TMDB_API_TOKEN,
    TMDB_BASE_URL,
    TMDB_IMAGE_BASE,
    TMDB_LANGUAGE,
    TMDB_POSTER_SIZE,
    TMDB_TIMEOUT_S,
)

logger = logging.getLogger(__name__)


def image_url(path: Any, *, size: str = TMDB_POSTER_SIZE, base: str = TMDB_IMAGE_BASE) -> str | None:
    p = str(path or "").strip()
    if not p:
        return None
    if not p.startswith("/"):
        p = "/" + p
    return f"{base}/{size}{p}"


def _with_image_urls(movie: dict[str, Any]) -> dict[str, Any]:
    out = dict(movie)
    out["poster_url"] = image_url(movie.get("poster_path"))
    if "backdrop_path" in movie:
        out["backdrop_url"] = image_url(movie.get("backdrop_path"), size="original")
    return out


def _page_envelope(data: dict[str, Any]) -> dict[str, Any]:
    results = data.get("results") or []
    if not isinstance(results, list):
        results = []
    return {
        "page": int(data.get("page") or 1),
        "results": [_with_image_urls(r) for r in results if isinstance(r, dict)],
        "total_pages": int(data.get("total_pages") or 0),
        "total_results": int(data.get("total_results") or 0),
    }


class TMDBClient(MovieCatalogPort):
    """Async HTTP client for TMDB API.

    Attributes:
        _base_url: TMDB API base URL
        _api_token: TMDB API bearer token (JWT)
        _api_key: TMDB v3 api key, used when no bearer token is configured
        _timeout_s: Request timeout in seconds
        _session: aiohttp ClientSession (lazily initialized)
        _lock: Async lock for thread-safe session creation
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        api_token: str | None = None,
        api_key: str | None = None,
        timeout_s: float | None = None,
        language: str | None = None,
    ) -> None:
        self._base_url = (base_url or TMDB_BASE_URL or "").rstrip("/")
        self._api_token = (api_token or TMDB_API_TOKEN or "").strip()
        self._api_key = (api_key or TMDB_API_KEY or "").strip()
        self._timeout_s = float(timeout_s or TMDB_TIMEOUT_S or 10.0)
        self._language = (language or TMDB_LANGUAGE or "en-US").strip()
        self._session: aiohttp.ClientSession | None = None
        self._lock = asyncio.Lock()

    @property
    def configured(self) -> bool:
        return bool(self._base_url and (self._api_token or self._api_key))

    def _headers(self) -> dict[str, str]:
        headers = {"accept": "application/json"}
        # Prefer v4 bearer token auth when available.
        if self._api_token:
            headers["Authorization"] = f"Bearer {self._api_token}"
        return headers

    def _auth_params(self) -> dict[str, str]:
        """v3 auth via api_key query param (used when bearer token is absent)."""
        if self._api_token:
            return {}
        if self._api_key:
            return {"api_key": self._api_key}
        return {}

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is not None and not self._session.closed:
            return self._session

        async with self._lock:
            # Double-check after acquiring lock
            if self._session is not None and not self._session.closed:
                return self._session

            timeout = aiohttp.ClientTimeout(total=self._timeout_s)
            self._session = aiohttp.ClientSession(timeout=timeout)
            return self._session

    async def _get_json(self, path: str, params: dict[str, Any], *, what: str) -> dict[str, Any]:
        """GET `path` and return the decoded JSON object.

        Raises:
            UpstreamError: not configured, HTTP error, timeout or bad payload.
        """
        if not self.configured:
            logger.warning("TMDB client not configured (missing base_url or auth)")
            raise UpstreamError("movie catalog is not configured")

        url = f"{self._base_url}{path}"
        query = {"language": self._language, **params, **self._auth_params()}
        try:
            session = await self._get_session()
            logger.debug("TMDB %s url=%s params=%s", what, url, {k: v for k, v in query.items() if k != "api_key"})
            async with session.get(url, params=query, headers=self._headers()) as resp:
                if resp.status >= 400:
                    error_text = await resp.text()
                    logger.error("TMDB %s failed (%s): %s", what, resp.status, error_text[:200])
                    raise UpstreamError(f"failed to fetch {what}")
                data = await resp.json(content_type=None)
        except UpstreamError:
            raise
        except asyncio.TimeoutError:
            logger.error("TMDB %s timeout after %ss", what, self._timeout_s)
            raise UpstreamError(f"failed to fetch {what}")
        except (aiohttp.ClientError, ValueError) as e:
            logger.exception("TMDB %s failed: %s", what, e)
            raise UpstreamError(f"failed to fetch {what}") from e

        if not isinstance(data, dict):
            logger.error("TMDB %s returned a non-object payload", what)
            raise UpstreamError(f"failed to fetch {what}")
        return data

    async def search_movies(
        self,
        *,
        query: str,
        page: int = 1,
        genre_id: int | None = None,
    ) -> dict[str, Any]:
        q = (query or "").strip()
        if q:
            params: dict[str, Any] = {"query": q, "page": int(page), "include_adult": "false"}
            if genre_id:
                params["with_genres"] = int(genre_id)
            data = await self._get_json("/search/movie", params, what="movie search")
        elif genre_id:
            data = await self._get_json(
                "/discover/movie",
                {"with_genres": int(genre_id), "page": int(page), "sort_by": "popularity.desc"},
                what="genre movies",
            )
        else:
            data = await self._get_json("/movie/popular", {"page": int(page)}, what="popular movies")
        return _page_envelope(data)

    async def get_movie(self, *, movie_id: int) -> dict[str, Any]:
        data = await self._get_json(f"/movie/{int(movie_id)}", {}, what="movie details")
        return _with_image_urls(data)

    async def list_genres(self) -> list[dict[str, Any]]:
        data = await self._get_json("/genre/movie/list", {}, what="genres")
        genres = data.get("genres") or []
        return [g for g in genres if isinstance(g, dict)] if isinstance(genres, list) else []

    async def movies_by_genre(self, *, genre_id: int, page: int = 1) -> dict[str, Any]:
        data = await self._get_json(
            "/discover/movie",
            {"with_genres": int(genre_id), "page": int(page), "sort_by": "popularity.desc"},
            what="genre movies",
        )
        return _page_envelope(data)

    async def top_rated(self, *, page: int = 1) -> dict[str, Any]:
        data = await self._get_json("/movie/top_rated", {"page": int(page)}, what="top rated movies")
        return _page_envelope(data)

    async def close(self) -> None:
        """Close the HTTP session and release resources."""
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None
