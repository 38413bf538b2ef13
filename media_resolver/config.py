from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="MEDIA_RESOLVER_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    host: str = "0.0.0.0"
    port: int = 7652
    debug: bool = False

    request_timeout: int = 30
    max_retries: int = 3
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/131.0.0.0 Safari/537.36"
    )
    # Comma-separated origins for CORS. Empty = allow "*" with no credentials.
    cors_origins: str = ""

    # Upper bound (seconds) on any single upstream lookup made through a cache
    fetch_timeout: float = 20.0
    # None keeps every entry for the process lifetime; an integer enables LRU eviction.
    manifest_cache_size: int | None = None
    listing_cache_size: int | None = None

    video_codec: str = "avc1"
    audio_codec: str = "mp4a"
    caption_format: str = "vtt"
    source_name: str = "YouTube"

    preferences_file: str = "./preferences.json"
    # "package.module:factory" returning a PlatformClient; loaded at startup
    platform_client: str = ""


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def get_preferences_path() -> Path:
    settings = get_settings()
    path = Path(settings.preferences_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    return path
