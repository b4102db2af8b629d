import os
from typing import Optional

from dotenv import load_dotenv

# 统一加载环境变量，确保配置来源一致。
# .env values take precedence over the shell environment.
load_dotenv(override=True)


def _get_env_int(key: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"环境变量 {key} 需要整数值，但当前为 {raw}") from exc


def _get_env_float(key: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"环境变量 {key} 需要浮点值，但当前为 {raw}") from exc


# ===== TMDB catalog =====
#
# v4 bearer token wins over the v3 api_key when both are set.

TMDB_BASE_URL = os.getenv("TMDB_BASE_URL", "https://api.themoviedb.org/3").strip()
TMDB_API_TOKEN = os.getenv("TMDB_API_TOKEN", "").strip()
TMDB_API_KEY = os.getenv("TMDB_API_KEY", "").strip()
TMDB_TIMEOUT_S = _get_env_float("TMDB_TIMEOUT_S", 5.0) or 5.0
TMDB_LANGUAGE = os.getenv("TMDB_LANGUAGE", "en-US").strip() or "en-US"
TMDB_IMAGE_BASE = os.getenv("TMDB_IMAGE_BASE", "https://image.tmdb.org/t/p").strip().rstrip("/")
TMDB_POSTER_SIZE = os.getenv("TMDB_POSTER_SIZE", "w500").strip() or "w500"


# ===== Postgres pools =====

POSTGRES_POOL_MIN_SIZE = _get_env_int("POSTGRES_POOL_MIN_SIZE", 1) or 1
POSTGRES_POOL_MAX_SIZE = _get_env_int("POSTGRES_POOL_MAX_SIZE", 5) or 5
