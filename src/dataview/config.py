"""Settings management for dataview."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the working directory (no-op when absent)
load_dotenv()


def _env_int(name: str, default: int) -> int:
    try:
        value = int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def _env_int_list(name: str, default: list[int]) -> list[int]:
    raw = os.getenv(name)
    if not raw:
        return list(default)
    values: list[int] = []
    for part in raw.split(","):
        try:
            n = int(part.strip())
        except ValueError:
            continue
        if n > 0 and n not in values:
            values.append(n)
    return values or list(default)


@dataclass
class Settings:
    """Global defaults for list views and the CLI shell."""

    # Paths
    home_dir: Path = field(
        default_factory=lambda: Path(os.getenv("DATAVIEW_HOME", Path.home() / ".dataview")).expanduser()
    )

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("DATAVIEW_LOG_LEVEL", "INFO"))

    # Paging
    page_size: int = field(default_factory=lambda: _env_int("DATAVIEW_PAGE_SIZE", 10))
    page_size_options: list[int] = field(
        default_factory=lambda: _env_int_list("DATAVIEW_PAGE_SIZE_OPTIONS", [10, 25, 50, 100])
    )

    # Search
    recent_limit: int = field(default_factory=lambda: _env_int("DATAVIEW_RECENT_LIMIT", 5))

    @property
    def history_dir(self) -> Path:
        return self.home_dir / "history"

    @property
    def logs_dir(self) -> Path:
        return self.home_dir / "logs"


def get_settings() -> Settings:
    """Get the global settings instance."""
    return Settings()
