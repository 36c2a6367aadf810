import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from sqlalchemy.engine import URL

from core.errors import ConfigError

load_dotenv()

BACKENDS = ("memory", "database")


def _env_bool(name: str, default: str = "False") -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class Settings:
    host: str = field(default_factory=lambda: os.getenv("HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    cache_dir: Path = field(default_factory=lambda: Path(os.getenv("CACHE_DIR", "./cache")))
    backend: str = field(default_factory=lambda: os.getenv("INVENTORY_BACKEND", "memory"))

    # Database settings (only used by the "database" backend)
    database_url: Optional[str] = field(default_factory=lambda: os.getenv("DATABASE_URL") or None)
    database_echo: bool = field(default_factory=lambda: _env_bool("DATABASE_ECHO"))
    db_host: str = field(default_factory=lambda: os.getenv("DB_HOST", "localhost"))
    db_port: int = field(default_factory=lambda: int(os.getenv("DB_PORT", "5432")))
    db_user: str = field(default_factory=lambda: os.getenv("DB_USER", "postgres"))
    db_password: str = field(default_factory=lambda: os.getenv("DB_PASSWORD", ""))
    db_name: str = field(default_factory=lambda: os.getenv("DB_NAME", "inventory"))
    db_pool_size: int = field(default_factory=lambda: int(os.getenv("DB_POOL_SIZE", "10")))
    validated: bool = field(default=False, init=False, repr=False, compare=False)

    def validate(self) -> "Settings":
        """Normalize values and make sure the cache directory exists.

        Raises ConfigError when the process must not start.
        """
        if self.backend not in BACKENDS:
            raise ConfigError(f"Unknown backend {self.backend!r} (expected one of {', '.join(BACKENDS)})")
        try:
            self.port = int(self.port)
        except (TypeError, ValueError):
            raise ConfigError(f"Invalid port: {self.port!r}")
        if not 1 <= self.port <= 65535:
            raise ConfigError(f"Port out of range: {self.port}")
        if self.db_pool_size < 1:
            raise ConfigError("DB_POOL_SIZE must be >= 1")

        self.cache_dir = Path(self.cache_dir).expanduser().resolve()
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigError(f"Cannot create cache directory {self.cache_dir}: {e}")
        if not self.cache_dir.is_dir():
            raise ConfigError(f"Cache path is not a directory: {self.cache_dir}")
        self.validated = True
        return self

    @property
    def sqlalchemy_url(self):
        if self.database_url:
            return self.database_url
        return URL.create(
            "postgresql+asyncpg",
            username=self.db_user,
            password=self.db_password or None,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        )
