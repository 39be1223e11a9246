from __future__ import annotations

import os
from pathlib import Path


def build_database_url(
    *,
    user: str,
    password: str | None,
    host: str,
    port: int | str,
    name: str,
) -> str:
    auth = f"{user}:{password}" if password else f"{user}"
    return f"postgresql+asyncpg://{auth}@{host}:{port}/{name}"


def build_sqlite_url(path: str | os.PathLike[str]) -> str:
    resolved = Path(path).expanduser().resolve()
    return f"sqlite+aiosqlite:///{resolved}"


__all__ = [
    "build_database_url",
    "build_sqlite_url",
]
