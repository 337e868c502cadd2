from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional


BASE_DIR = Path(__file__).resolve().parent.parent

DEV_PORT = 3001
PRODUCTION_PORT = 80

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


def _env_path(name: str, default: Path) -> Path:
    return Path(os.getenv(name, str(default))).expanduser()


@dataclass(frozen=True)
class Settings:
    dev: bool = False
    host: str = "0.0.0.0"
    port_override: Optional[int] = None
    posts_dir: Path = BASE_DIR / "posts"
    static_dir: Path = BASE_DIR / "blog-front-end" / "build"
    database_url: str = f"sqlite:///{BASE_DIR / 'data' / 'blog.db'}"
    log_level: str = "INFO"

    @property
    def port(self) -> int:
        if self.port_override is not None:
            return self.port_override
        return DEV_PORT if self.dev else PRODUCTION_PORT

    @property
    def serve_static(self) -> bool:
        """The client bundle is only served outside dev mode."""
        return not self.dev

    def with_overrides(self, **changes) -> "Settings":
        return replace(self, **{key: value for key, value in changes.items() if value is not None})


def load_settings() -> Settings:
    """Build settings from BLOG_* environment variables."""
    defaults = Settings()
    port = os.getenv("BLOG_PORT")
    return Settings(
        dev=_env_flag("BLOG_DEV"),
        host=os.getenv("BLOG_HOST", defaults.host),
        port_override=int(port) if port else None,
        posts_dir=_env_path("BLOG_POSTS_DIR", defaults.posts_dir),
        static_dir=_env_path("BLOG_STATIC_DIR", defaults.static_dir),
        database_url=os.getenv("BLOG_DATABASE_URL", defaults.database_url),
        log_level=os.getenv("BLOG_LOG_LEVEL", defaults.log_level).upper(),
    )
