from __future__ import annotations

from enum import Enum

from pydantic import ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings


class DatabaseType(str, Enum):
    POSTGRES = "postgres"
    SQLITE = "sqlite"


class StorageType(str, Enum):
    MEMORY = "memory"
    SQLITE = "sqlite"


class Settings(BaseSettings):
    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    primary_db_type: DatabaseType = DatabaseType.SQLITE
    postgres_url: str = ""
    sqlite_url: str = "sqlite+aiosqlite:///./workbench.db"
    db_query_timeout_seconds: float = 30.0

    # Guardrail
    default_limit: int = Field(default=100, gt=0)
    max_limit: int = Field(default=1000, gt=0)

    # History
    max_history_items: int = Field(default=10, gt=0)
    history_storage_key: str = "dq_pro_history"
    storage_type: StorageType = StorageType.MEMORY
    storage_sqlite_path: str = "./workbench_state.db"

    # App
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    log_level: str = "INFO"

    @field_validator("primary_db_type", "storage_type", mode="before")
    @classmethod
    def normalize_enum(cls, v: str) -> str:
        if isinstance(v, str):
            return v.lower()
        return v


def get_settings() -> Settings:
    return Settings()
