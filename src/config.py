from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Image loading
    image_fetcher: str = "http"  # "http"
    image_fetch_timeout: int = 30
    image_fetch_retries: int = 2

    # Silhouette discovery
    silhouette_min_area: int = 500
    silhouette_threshold: int = 30
    silhouette_connectivity: int = 8  # 4 | 8
    silhouette_auto_resize: bool = False

    # Verification
    verification_threshold: float = 30.0

    # Overlay
    overlay_jpeg_quality: int = 90


@lru_cache
def get_settings() -> Settings:
    return Settings()
