"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # PostgreSQL (users, profiles)
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "career_user"
    postgres_password: str = "password"
    postgres_db: str = "career_db"

    # MongoDB (uploaded documents)
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "career_docs"

    # Inference (OpenAI-compatible API)
    llm_api_key: str = ""
    llm_base_url: Optional[str] = None
    llm_model: str = "gpt-4o"

    # JWT issued by the identity provider
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_audience: Optional[str] = None

    # Uploads
    upload_dir: str = "/tmp/uploads"
    max_upload_size_mb: int = 100

    # App
    debug: bool = False
    log_level: str = "INFO"

    @property
    def postgres_url(self) -> str:
        """Construct PostgreSQL connection URL"""
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
