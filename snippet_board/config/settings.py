from functools import lru_cache
from pathlib import Path
from typing import Optional, Union

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Root directory of the snippet_board package
SERVICE_ROOT_DIR = Path(__file__).parent.parent.resolve()
PROJECT_ROOT_DIR = SERVICE_ROOT_DIR.parent


class Settings(BaseSettings):
    # Application settings
    APP_NAME: str = "SnippetBoard"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8080

    # Storage settings
    STORE_PATH: str = "serverdb.json"
    STATIC_DIR: Optional[str] = None

    # Reddit integration
    REDDIT_USER_AGENT: str = "snippet_board/0.1"
    REDDIT_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)
    REDDIT_URL_PATTERN: str = (
        r"https://www\.reddit\.com/r/adventofcode/comments/[^/]+/comment/[^/?#]+"
    )

    # CORS settings
    CORS_ORIGINS: Union[str, list[str]] = "*"
    CORS_ALLOW_METHODS: Union[str, list[str]] = "GET,POST,PUT"
    CORS_ALLOW_HEADERS: Union[str, list[str]] = "*"

    # Logging configuration path (can be overridden by env var)
    LOGGING_CONFIG_PATH: str = str(SERVICE_ROOT_DIR / "config" / "logging_config.yaml")

    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT_DIR / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def model_post_init(self, __context) -> None:
        """Parse comma-separated strings into lists after model initialization."""
        if isinstance(self.CORS_ORIGINS, str):
            self.CORS_ORIGINS = _split_csv(self.CORS_ORIGINS)

        if isinstance(self.CORS_ALLOW_METHODS, str):
            self.CORS_ALLOW_METHODS = _split_csv(self.CORS_ALLOW_METHODS)

        if isinstance(self.CORS_ALLOW_HEADERS, str):
            self.CORS_ALLOW_HEADERS = _split_csv(self.CORS_ALLOW_HEADERS)


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Configured settings instance
    """
    return Settings()
