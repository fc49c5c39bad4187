"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Every setting can be overridden by a BLOG_-prefixed environment variable
    - get_settings() is cached (lru_cache) — single instance per process
    - missing_data_policy is the only place the missing-file policy is decided

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Templates and static assets default to the copies shipped inside the package
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

from blogserver.core.domain_types import MissingDataPolicy

PACKAGE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="BLOG_", case_sensitive=False,
    )

    # Storage
    data_file: Path = Path("data/entries.json")
    missing_data_policy: MissingDataPolicy = MissingDataPolicy.START_EMPTY
    # Save after every submission in addition to the shutdown save
    save_on_submit: bool = False
    save_timeout_seconds: float = Field(10.0, gt=0)

    # Rendering
    template_dir: Path = PACKAGE_DIR / "templates"
    static_dir: Path = PACKAGE_DIR / "static"
    main_template: str = "main.html"
    submit_template: str = "submit.html"

    # Server
    host: str = "127.0.0.1"
    port: int = 8080

    # Observability
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
