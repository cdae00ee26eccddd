from __future__ import annotations

import typing as t
from pathlib import Path

import pydantic as p

from .base import BaseSettings


class StorageSettings(BaseSettings):
    persistent: PersistentSettings


class PersistentSettings(BaseSettings):
    """Exactly one of the two backends is configured; postgresql wins if both are."""

    postgresql: PostgresqlSettings | None = None
    sqlite: SqliteSettings | None = None

    @p.model_validator(mode="after")
    def check_backend(self) -> PersistentSettings:
        if self.postgresql is None and self.sqlite is None:
            raise ValueError("one of postgresql or sqlite must be configured")
        return self


class PostgresqlSettings(BaseSettings):
    host: p.IPvAnyAddress | str | None = None
    port: int = 5432
    database: str
    driver: t.Literal["postgresql+psycopg"] = "postgresql+psycopg"


class SqliteSettings(BaseSettings):
    # None means an in-memory database
    path: Path | None = None
    driver: t.Literal["sqlite+pysqlite"] = "sqlite+pysqlite"
