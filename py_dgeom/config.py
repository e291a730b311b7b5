"""Configuration management."""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Library settings, read from ``DGEOM_*`` environment variables or ``.env``."""

    # Metric defaults used when a map is built without an explicit metric
    default_exponent: float = Field(default=2, ge=1, description="Default Lp exponent")
    exact_metric: bool = Field(
        default=True, description="Use exact integer arithmetic for the default metric"
    )

    # Sweep
    sweep_workers: int = Field(default=1, ge=1, description="Threads per sweep pass")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="console", description="Logging format (console or json)")

    class Config:
        env_file = ".env"
        env_prefix = "DGEOM_"
        extra = "ignore"


settings = Settings()
