"""Configuration management using pydantic-settings."""
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Backend API configuration
    api_base_url: str = "https://api.velo-altitude.fr"
    request_timeout: float = 10.0

    # Data source selection
    # MOCK_API wins when set; otherwise anything but production runs on mocks
    mock_api: Optional[bool] = None
    app_env: str = "development"

    # Mock behaviour
    mock_latency_scale: float = 1.0
    mock_seed: Optional[int] = None

    # Cache settings
    cache_max_entries: int = 256
    coalesce_timeout: float = 30.0

    # Local key/value storage (auth token, chat history)
    local_storage_path: Path = Path("./data/local_storage.db")

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def mock_mode(self) -> bool:
        """True when accessors should fabricate data instead of calling the API."""
        if self.mock_api is not None:
            return self.mock_api
        return self.app_env.lower() != "production"


settings = Settings()
