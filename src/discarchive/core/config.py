"""Server configuration."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Server configuration loaded from environment."""

    model_config = SettingsConfigDict(
        env_prefix="DISCARCHIVE_",
        env_file=".env",
    )

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    # API settings
    api_key: Optional[str] = None  # If set, required for mutating routes

    # Database settings
    database_url: Optional[str] = None  # Default: sqlite+aiosqlite:///./data/discarchive.db
    database_echo: bool = False  # Enable SQL query logging for debugging

    # Disc settings
    disc_code_max_attempts: int = 1000  # Give up allocating a code after this many collisions
    creation_note: str = "Disc created"  # Note on the inspection record added with a new disc

    # Listing settings
    default_page_size: int = 10
    max_page_size: int = 100


settings = Settings()
