from __future__ import annotations

from infrastructure.config.settings import (  # noqa: F401
    POSTGRES_POOL_MAX_SIZE,
    POSTGRES_POOL_MIN_SIZE,
    TMDB_API_KEY,
    TMDB_API_TOKEN,
    TMDB_BASE_URL,
    TMDB_IMAGE_BASE,
    TMDB_LANGUAGE,
    TMDB_POSTER_SIZE,
    TMDB_TIMEOUT_S,
)
