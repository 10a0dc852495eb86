"""Process configuration read from environment variables.

Recognized variables:

- PERSIST_MODE      "filesystem" selects the JSON file store; any other
                    value selects the database store. Default: "database".
- SHOP_DATA_DIR     directory holding products.json / carts.json.
                    Default: "./data".
- DATABASE_URL      SQLAlchemy URL for the database store.
                    Default: "sqlite:///./shop.db".
- SHOP_ENV          "production" enables the production logging policy.
- SHOP_LOG_LEVEL    overrides the console log level (e.g. "WARNING").
- SHOP_HOST         bind host for ``shop serve``. Default: "0.0.0.0".
- SHOP_PORT         bind port for ``shop serve``. Default: 8080.

The persistence mode is read once and stays fixed for the process.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

FILESYSTEM_MODE = "filesystem"


@dataclass(frozen=True)
class Settings:
    persist_mode: str = "database"
    data_dir: Path = Path("data")
    database_url: str = "sqlite:///./shop.db"
    environment: str = "development"
    log_level: Optional[str] = None
    host: str = "0.0.0.0"
    port: int = 8080

    @property
    def uses_filesystem(self) -> bool:
        return self.persist_mode == FILESYSTEM_MODE

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @classmethod
    def from_env(cls) -> "Settings":
        port_raw = os.getenv("SHOP_PORT", "").strip()
        try:
            port = int(port_raw) if port_raw else cls.port
        except ValueError:
            port = cls.port
        if port <= 0 or port > 65535:
            port = cls.port

        return cls(
            persist_mode=os.getenv("PERSIST_MODE", cls.persist_mode).strip(),
            data_dir=Path(os.getenv("SHOP_DATA_DIR", str(cls.data_dir))),
            database_url=os.getenv("DATABASE_URL", cls.database_url),
            environment=os.getenv("SHOP_ENV", cls.environment).strip().lower(),
            log_level=os.getenv("SHOP_LOG_LEVEL") or None,
            host=os.getenv("SHOP_HOST", cls.host),
            port=port,
        )


_SETTINGS: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the process settings, reading the environment on first use."""
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS


def set_settings(settings: Optional[Settings]) -> None:
    """Replace (or with None, reset) the cached settings. Used by tests."""
    global _SETTINGS
    _SETTINGS = settings
