from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="AETHER_",
        extra="ignore",
        case_sensitive=False,
    )

    # Application
    debug: bool = False
    log_level: str = "INFO"

    # API
    api_prefix: str = "/api/v1"
    cors_origins: list[str] = [
        "http://localhost:8081",
        "http://localhost:19006",
        "http://127.0.0.1:8081",
        "http://127.0.0.1:19006",
    ]
    trusted_hosts: list[str] = ["*"]
    root_path: str = ""

    # Local vault
    vault_dir: Path = Path("~/.aether/vault")
    local_backend: Literal["filesystem", "blob"] = "filesystem"
    seed_vault: bool = True

    # Supabase (cloud vault is disabled unless both are set)
    supabase_url: str | None = None
    supabase_anon_key: str | None = None
    supabase_notes_table: str = "notes"

    @field_validator("vault_dir")
    @classmethod
    def expand_vault_dir(cls, v: Path) -> Path:
        return v.expanduser()

    @property
    def cloud_enabled(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)


settings = Settings()
