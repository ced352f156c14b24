"""Database connection settings, read straight from the environment.

Kept apart from ``infra.settings`` so that Alembic can import it without the
rest of the application configuration.
"""

from __future__ import annotations

import os

DRIVER_SCHEME = "postgresql+psycopg2://"
# hosted Postgres providers still hand out URLs with the short scheme
_BARE_SCHEMES = ("postgres://", "postgresql://")


def database_url() -> str:
    url = os.getenv("DATABASE_URL", "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL environment variable is not set")

    for scheme in _BARE_SCHEMES:
        if url.startswith(scheme):
            return DRIVER_SCHEME + url[len(scheme) :]
    return url


def pool_options() -> dict[str, int | bool]:
    return {
        "pool_size": int(os.getenv("DB_POOL_SIZE", "10")),
        "max_overflow": int(os.getenv("DB_MAX_OVERFLOW", "20")),
        "pool_recycle": int(os.getenv("DB_POOL_RECYCLE_SECONDS", "3600")),
        "pool_pre_ping": True,
    }
