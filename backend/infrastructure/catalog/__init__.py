from __future__ import annotations

from infrastructure.catalog.tmdb_client import TMDBClient, image_url


def build_movie_catalog() -> TMDBClient:
    """Catalog adapter configured from `infrastructure.config.settings`."""
    return TMDBClient()


__all__ = ["TMDBClient", "build_movie_catalog", "image_url"]
