from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "Conversational Survey"
    debug: bool = False
    cors_origins: list[str] = ["*"]

    # Anthropic
    anthropic_api_key: str = ""
    chat_model: str = "claude-sonnet-4-20250514"

    # Admin namespace shared secret (Authorization: Bearer <admin_password>)
    admin_password: str = "admin123"

    # Storage
    data_dir: Path = Path("data")
    static_dir: Path = Path("public")

    # Session registry: empty URL keeps the registry in process memory
    session_registry_url: str = ""
    session_registry_ttl_seconds: int = 0  # 0 = no expiry

    # Creative-curriculum check-in cadence
    checkin_interval_minutes: int = 10

    @property
    def sessions_dir(self) -> Path:
        return self.data_dir / "sessions"

    @property
    def reports_dir(self) -> Path:
        return self.data_dir / "reports"


@lru_cache
def get_settings() -> Settings:
    return Settings()
