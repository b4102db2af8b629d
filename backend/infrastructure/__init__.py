"""
Infrastructure layer: adapters behind the application ports.

- `persistence.postgres`: asyncpg stores (with in-memory fallbacks) for
  watch records and comments
- `catalog`: TMDB HTTP client
- `config`: infra-side environment settings
"""

__all__ = [
    "catalog",
    "config",
    "persistence",
]
