"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"

    # Database
    database_url: str = "postgresql+asyncpg://ecommerce:ecommerce_dev_password@db:5432/ecommerce"
    database_pool_size: int = 5

    # Pagination
    default_page_size: int = 10
    max_page_size: int = 100
    reference_max_page_size: int = 50

    # Aggregations
    brand_summary_limit: int = 50
    department_top_brands: int = 5

    # Department migration
    migration_batch_size: int = 1000

    # Requests
    max_payload_bytes: int = 10 * 1024 * 1024
    cors_origins: list[str] = ["*"]

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def is_production(self) -> bool:
        """Whether internal error messages must be hidden from clients."""
        return self.environment.lower() == "production"


settings = Settings()
