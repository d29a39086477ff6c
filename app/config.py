"""Application configuration loaded from environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Central configuration, read from environment / .env file."""

    # Database (empty = demo mode on the in-memory store)
    database_url: str = ""

    # CDN
    cdn_host: str = "cdn.gridrr.com"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    allowed_origins: str = "*"
    rate_limit_per_minute: int = 20
    site_url: str = "https://gridrr.com"

    # Cache
    cache_ttl_seconds: int = 60
    cache_max_entries: int = 512

    # Query defaults
    default_page_size: int = 6
    max_page_size: int = 100
    adjacent_window: int = 50
    counts_sample_size: int = 100
    sitemap_max_entries: int = 5000

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def is_demo_mode(self) -> bool:
        return not self.database_url

    @property
    def cors_origins(self) -> list[str]:
        if self.allowed_origins == "*":
            return ["*"]
        return [o.strip() for o in self.allowed_origins.split(",")]


settings = Settings()
