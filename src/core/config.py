"""Runtime configuration, read from environment variables."""

import os
from functools import lru_cache

from pydantic import BaseModel, Field

from src.blokus.cell import MAX_BOARD_SIZE

TRUTHY = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    database_url: str = "sqlite:///./blokus.db"
    sql_echo: bool = False
    board_size: int = Field(default=20, ge=1, le=MAX_BOARD_SIZE)
    append_retries: int = Field(default=3, ge=1)
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]
    port: int = 8080

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            database_url=os.getenv("BLOKUS_DATABASE_URL", "sqlite:///./blokus.db"),
            sql_echo=os.getenv("BLOKUS_SQL_ECHO", "false").lower() in TRUTHY,
            board_size=int(os.getenv("BLOKUS_BOARD_SIZE", "20")),
            append_retries=int(os.getenv("BLOKUS_APPEND_RETRIES", "3")),
            log_level=os.getenv("BLOKUS_LOG_LEVEL", "INFO").upper(),
            cors_origins=os.getenv("CORS_ORIGINS", "*").split(","),
            port=int(os.getenv("BLOKUS_PORT", "8080")),
        )


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
