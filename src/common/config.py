"""Project configuration and paths.

Loads settings from config/settings.yaml and environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

# === Paths ===
PROJECT_ROOT = Path(__file__).parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"
DATA_DIR = PROJECT_ROOT / "data"
RAW_HTML_DIR = DATA_DIR / "raw_html"

# Load .env from project root
load_dotenv(PROJECT_ROOT / ".env")


class LoaderSettings(BaseModel):
    """Settings for the product page loader."""
    request_timeout: int = 30
    max_retries: int = 3
    backoff_base: float = 2.0
    rate_limit_rpm: int = 20
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/121.0.0.0 Safari/537.36"
    )
    random_user_agent: bool = True
    cache_raw_html: bool = False
    raw_html_cache_dir: str = str(RAW_HTML_DIR)


class ExtractionSettings(BaseModel):
    """Tunables of the extraction engine."""
    max_name_distance: int = Field(default=7, gt=0)
    name_max_length: int = Field(default=96, gt=0)
    symbol_bonus: int = 15


class Settings(BaseModel):
    """Top-level application settings."""
    loader: LoaderSettings = Field(default_factory=LoaderSettings)
    extraction: ExtractionSettings = Field(default_factory=ExtractionSettings)

    @classmethod
    def load(cls, path: Path | None = None) -> Settings:
        """Load settings from config/settings.yaml, falling back to defaults.

        Environment variables override the loader section.
        """
        settings_path = path or CONFIG_DIR / "settings.yaml"
        data: dict = {}
        if settings_path.exists():
            with open(settings_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}

        loader = dict(data.get("loader") or {})
        if timeout := os.getenv("PRICE_ENGINE_REQUEST_TIMEOUT"):
            loader["request_timeout"] = int(timeout)
        if retries := os.getenv("PRICE_ENGINE_MAX_RETRIES"):
            loader["max_retries"] = int(retries)
        if rpm := os.getenv("PRICE_ENGINE_RATE_LIMIT_RPM"):
            loader["rate_limit_rpm"] = int(rpm)
        data["loader"] = loader

        return cls(**data)


# Singleton settings instance
settings = Settings.load()
