"""
Logging configuration.

The library itself only emits records through module loggers. Applications that
want jsonfetch's default console output call `configure_logging()`, which loads
the packaged YAML config (`src/jsonfetch/config/logging.yaml`) and applies the
level from settings (e.g., `JSONFETCH_LOG_LEVEL`).
"""

from __future__ import annotations

import copy
import logging.config

from jsonfetch.config.settings import Settings, get_logging_config, get_settings


def configure_logging(settings: Settings | None = None) -> None:
    """Configure the Python logging system based on packaged YAML config + settings."""
    settings = settings or get_settings()
    # The loaded mapping is cached; dictConfig gets a private copy.
    config = copy.deepcopy(get_logging_config())

    level = settings.app.log_level.upper()
    config.setdefault("root", {})["level"] = level
    for handler in config.get("handlers", {}).values():
        if isinstance(handler, dict) and "level" in handler:
            handler["level"] = level

    logging.config.dictConfig(config)
