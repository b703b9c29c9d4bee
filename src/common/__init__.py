# Common utilities and shared modules
"""
Shared components used by the price engine and its CLI:
- Project configuration
- Logging configuration
"""

from .config import settings, Settings, ExtractionSettings, LoaderSettings, PROJECT_ROOT
from .logging import setup_logging

__all__ = [
    "settings",
    "Settings",
    "ExtractionSettings",
    "LoaderSettings",
    "PROJECT_ROOT",
    "setup_logging",
]
