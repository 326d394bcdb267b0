"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "0.1.0"
    debug: bool = False

    # Database
    database_url: str = "postgresql+asyncpg://catalog:catalog_dev_password@db:5432/catalogdb"

    # Pictures are served from <pic_base_path>/Pics
    pic_base_path: str = "."

    # Embeddings (catalog AI is disabled when no endpoint is configured)
    embedding_endpoint: str | None = None
    embedding_api_key: str | None = None
    embedding_model: str = "text-embedding-3-small"
    embedding_dimensions: int = 384
    embedding_timeout: float = 30.0

    # Integration events
    event_bus_url: str | None = None
    event_bus_timeout: float = 10.0
    # In-progress entries older than this (seconds) are treated as interrupted
    event_publish_stale_after: float = 300.0

    # Pagination
    max_page_size: int = 100

    # Logging
    log_level: str = "INFO"

    class Config:
        """Pydantic configuration."""

        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
