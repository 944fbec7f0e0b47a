# ruff: noqa: E501
import os
from typing import Annotated, Any

from loguru import logger
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # --- Core Settings ---
    ENVIRONMENT: Annotated[str, Field(default="development", description="Application environment (e.g., 'development', 'staging', 'production').")]

    # --- Logging ---
    LOG_LEVEL: Annotated[str, Field(default="DEBUG", description="Logging level for the application (e.g., DEBUG, INFO, WARNING).")]

    # --- Backend API ---
    API_URL: Annotated[str, Field(default="https://yorx-backend.onrender.com", description="Fixed origin of the workout backend.")]
    API_TIMEOUT: Annotated[float, Field(default=30.0, description="Transport timeout in seconds for backend calls. No other timeout exists.")]
    API_MAX_CONNECTIONS: Annotated[int, Field(default=20, description="Maximum number of pooled HTTP connections.")]
    API_MAX_KEEPALIVE_CONNECTIONS: Annotated[int, Field(default=5, description="Maximum number of idle keep-alive connections.")]

    # --- Key-value store (Redis) ---
    REDIS_URL: Annotated[str, Field(default="redis://127.0.0.1:6379", description="Full connection URL for the Redis key-value store.")]
    REDIS_DB: Annotated[int, Field(default=0, description="Redis database index holding session, cache and local data.")]
    STORE_KEY_PREFIX: Annotated[str, Field(default="wodscale:", description="Namespace prepended to every logical store key.")]

    # --- Cache ---
    PROFILE_CACHE_TTL_MS: Annotated[int, Field(default=10 * 60 * 1000, description="Max age in milliseconds of the cached profile.")]
    WORKOUT_CACHE_TTL_MS: Annotated[int, Field(default=5 * 60 * 1000, description="Max age in milliseconds of a cached workout history page.")]
    WORKOUT_CACHE_MAX_PAGE: Annotated[int, Field(default=3, description="Highest workout history page that is cached; later pages always hit the backend.")]
    WORKOUT_PAGE_SIZE: Annotated[int, Field(default=10, description="Default number of workouts requested per history page.")]

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore",
    }

    @field_validator("API_URL", mode="before")
    @classmethod
    def _strip_api_url(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().rstrip("/")
        return value

    @field_validator("PROFILE_CACHE_TTL_MS", "WORKOUT_CACHE_TTL_MS", "WORKOUT_PAGE_SIZE", "WORKOUT_CACHE_MAX_PAGE")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be a positive integer")
        return value

    @model_validator(mode="after")
    def _compute_derived_fields(self) -> "Settings":
        self._configure_redis()
        if self.ENVIRONMENT == "production" and not self.API_URL.startswith("https://"):
            logger.warning(f"API_URL is not served over HTTPS in production: {self.API_URL}")
        return self

    def _configure_redis(self) -> None:
        """Compose the Redis URL from host/port hints when they are provided."""
        redis_host = os.getenv("REDIS_HOST")
        redis_port = os.getenv("REDIS_PORT")
        if redis_host or redis_port:
            self.REDIS_URL = f"redis://{redis_host or '127.0.0.1'}:{redis_port or 6379}"


settings = Settings()  # noqa  # pyrefly: ignore[missing-argument]
