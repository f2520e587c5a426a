"""
Client configuration using Pydantic settings.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Settings for the API client and offline sync agent."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    LEARNING_API_URL: str = "http://localhost:8000/api"
    OFFLINE_DB_PATH: str = "./offline_store.db"
    REQUEST_TIMEOUT_SECONDS: float = 10.0

    # Sync and cache windows
    SYNC_INTERVAL_SECONDS: int = 5 * 60
    CACHE_TTL_SECONDS: int = 24 * 60 * 60
    OFFLINE_CONTENT_TTL_SECONDS: int = 7 * 24 * 60 * 60


client_settings = ClientSettings()
