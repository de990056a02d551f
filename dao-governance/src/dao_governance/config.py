from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DAO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_env: str = "dev"
    log_level: str = "INFO"
    dao_name: str = "dao-governance"

    state_path: Path = Path("governance-state.json")
    weights_path: Path | None = None
    require_signatures: bool = True
    max_page_size: int = 50

    solana_rpc_url: str = "http://127.0.0.1:8899"
    solana_rpc_timeout: float = 10.0
    badge_mint: str = ""


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    return AppSettings()
