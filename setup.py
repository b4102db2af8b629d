from __future__ import annotations

from setuptools import find_namespace_packages, setup

_LAYERS = ["application", "config", "domain", "infrastructure", "server"]

setup(
    name="cinelog",
    version="0.1.0",
    # Repo convention: backend code lives under `backend/` and each layer is a
    # top-level import (`import domain`, `import server`, ...).
    package_dir={"": "backend"},
    packages=find_namespace_packages(
        where="backend",
        include=_LAYERS + [f"{name}.*" for name in _LAYERS],
    ),
    python_requires=">=3.10",
    install_requires=[
        "fastapi>=0.110",
        "uvicorn>=0.29",
        "pydantic==2.10.6",
        "python-dotenv>=1.0",
        "asyncpg>=0.29",
        "aiohttp>=3.9",
        # IANA zone data for zoneinfo on hosts without a system tz database.
        "tzdata",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "httpx>=0.27",
        ],
    },
)
