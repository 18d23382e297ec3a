"""Configuration management for prefix-manifest."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    log_level: str = "INFO"
    otel_enabled: bool = False
    otel_service_name: str = "prefix-manifest"

    # Page fetch retry budget
    retry_max_attempts: int = 5
    retry_initial_wait: float = 1.0
    retry_max_wait: float = 30.0
    retry_jitter: float = 1.0

    model_config = {
        "env_prefix": "PREFIX_MANIFEST_",
        "case_sensitive": False,
    }


settings = Settings()
