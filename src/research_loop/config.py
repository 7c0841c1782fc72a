"""
Configuration settings for Research Loop.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from research_loop.retry.policy import RetryPolicy


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "Research Loop"
    APP_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"  # "json" for machine-parseable output

    # === Research Backend (client side) ===
    API_BASE_URL: Optional[str] = None  # e.g. https://api.example.com
    PORT: int = 4000  # Used for http://localhost:{PORT} when API_BASE_URL is unset
    REQUEST_TIMEOUT: float = 180.0  # seconds; deep research calls are slow

    # === Retry (client side) ===
    RETRY_MAX_ATTEMPTS: int = 3
    RETRY_INITIAL_DELAY: float = 0.5  # seconds
    RETRY_MAX_DELAY: float = 5.0
    RETRY_BACKOFF_MULTIPLIER: float = 2.0
    RETRY_JITTER_FRACTION: float = 0.1

    # === Loop ===
    MAX_LOOPS: int = 10
    DEFAULT_LOOPS: int = 1

    # === Research Service (server side) ===
    SERVER_HOST: str = "0.0.0.0"
    CORS_ALLOW_ORIGINS: list[str] = ["*"]
    OLLAMA_BASE_URL: str = "http://localhost:11434"
    OLLAMA_MODEL: str = "qwen2.5:7b"
    OLLAMA_TIMEOUT: int = 120  # seconds
    LLM_TEMPERATURE: float = 0.3
    LLM_MAX_TOKENS: int = 4096

    # === Retry (server side, wraps LLM calls) ===
    SERVER_RETRY_MAX_ATTEMPTS: int = 3
    SERVER_RETRY_INITIAL_DELAY: float = 1.0
    SERVER_RETRY_MAX_DELAY: float = 10.0
    SERVER_RETRY_BACKOFF_MULTIPLIER: float = 2.0
    SERVER_RETRY_JITTER_FRACTION: float = 0.1

    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True

    @property
    def resolved_api_base_url(self) -> str:
        """Backend base URL without trailing slashes."""
        base = (self.API_BASE_URL or "").strip().rstrip("/")
        if base:
            return base
        return f"http://localhost:{self.PORT}"

    def retry_policy(self) -> RetryPolicy:
        """Retry policy applied to calls against the research backend."""
        return RetryPolicy(
            max_attempts=self.RETRY_MAX_ATTEMPTS,
            initial_delay=self.RETRY_INITIAL_DELAY,
            max_delay=self.RETRY_MAX_DELAY,
            backoff_multiplier=self.RETRY_BACKOFF_MULTIPLIER,
            jitter_fraction=self.RETRY_JITTER_FRACTION,
        )

    def server_retry_policy(self) -> RetryPolicy:
        """Retry policy applied by the research service to LLM calls."""
        return RetryPolicy(
            max_attempts=self.SERVER_RETRY_MAX_ATTEMPTS,
            initial_delay=self.SERVER_RETRY_INITIAL_DELAY,
            max_delay=self.SERVER_RETRY_MAX_DELAY,
            backoff_multiplier=self.SERVER_RETRY_BACKOFF_MULTIPLIER,
            jitter_fraction=self.SERVER_RETRY_JITTER_FRACTION,
        )


# Global settings instance
settings = Settings()
