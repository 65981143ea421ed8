import os
import logging
from dataclasses import dataclass, field
from typing import Optional


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """
    Application settings loaded from environment variables.

    Values are read when the instance is created, so environment variables
    must be set before the first call to `get_settings()`.
    """

    database_uri: str = field(
        default_factory=lambda: os.getenv(
            "DATABASE_URI", "sqlite+aiosqlite:///./dev.db"
        )
    )
    api_host: str = field(
        default_factory=lambda: os.getenv("API_HOST", "0.0.0.0")
    )
    api_port: int = field(
        default_factory=lambda: int(os.getenv("API_PORT", "8000"))
    )
    log_level: str = field(
        default_factory=lambda: os.getenv("LOG_LEVEL", "INFO")
    )
    default_page_size: int = field(
        default_factory=lambda: int(os.getenv("DEFAULT_PAGE_SIZE", "20"))
    )
    max_page_size: int = field(
        default_factory=lambda: int(os.getenv("MAX_PAGE_SIZE", "2000"))
    )
    create_schema: bool = field(
        default_factory=lambda: _env_bool("CREATE_SCHEMA", "true")
    )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger once. Subsequent calls are no-ops because
    `basicConfig` leaves an already configured root logger untouched.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
