from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Client settings loaded from environment variables with JSONAPI_ prefix."""

    # Content negotiation
    media_type: str = "application/vnd.api+json"
    # Accept "<media type>; charset=..." on read (Firefox < 43 workaround)
    tolerate_charset: bool = True
    # Serialization
    json_indent: int = 2
    # Transport
    timeout: float = 10.0

    model_config = SettingsConfigDict(env_prefix="JSONAPI_", frozen=True)


@lru_cache
def get_settings() -> ClientSettings:
    """Return cached client settings instance."""
    return ClientSettings()
