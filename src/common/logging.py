"""Logging configuration for the price engine."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Chatty below WARNING on every page load.
NOISY_LOGGERS = ("urllib3", "fake_useragent", "charset_normalizer")


def setup_logging(
    level: int = logging.INFO,
    module_name: str = "src",
    quiet_http: bool = True,
) -> logging.Logger:
    """Configure the engine logger with a single stdout handler.

    Calling it again only changes the level, so the CLI can switch to
    DEBUG without duplicating output.

    Args:
        level: Logging level (default INFO).
        module_name: Logger to configure. The default covers every module
            under the ``src`` package.
        quiet_http: Keep HTTP library loggers at WARNING.

    Returns:
        Configured logger.
    """
    logger = logging.getLogger(module_name)
    logger.setLevel(level)

    if quiet_http:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)

    return logger
