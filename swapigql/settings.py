"""
Configuration for the gateway.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file='.env',
        env_prefix='SWAPI_GATEWAY_',
        case_sensitive=False,
        extra='ignore',
    )

    # Upstream
    swapi_url: str = 'https://swapi.dev/api'
    timeout: float = 10.0  # seconds
    max_concurrency: int = 10

    # Server
    host: str = '127.0.0.1'
    port: int = 3000
    path: str = '/graphql'
    playground: bool = True
    debug: bool = False
    log_level: str = 'INFO'
