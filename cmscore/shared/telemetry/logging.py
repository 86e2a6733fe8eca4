"""Logging configuration for cmscore.

The root level comes from settings.log_level (DEBUG when settings.debug is
set). Noisy cmscore packages get their own level so a host application can
trace search parameter handling without turning on DEBUG everywhere.
"""

import logging
import sys

from cmscore.core.config import Settings, get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Logger name -> Settings attribute holding its level (None inherits the root level).
PACKAGE_LEVEL_SETTINGS: dict[str, str] = {
    "cmscore.orm.search": "search_log_level",
}


def root_log_level(settings: Settings) -> int:
    if settings.debug:
        return logging.DEBUG
    return logging.getLevelNamesMapping()[settings.log_level.upper()]


def setup_logging() -> None:
    """Configure framework-wide logging to stdout, then the per-package levels."""
    settings = get_settings()
    logging.basicConfig(
        level=root_log_level(settings),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    configure_package_levels(settings)


def configure_package_levels(settings: Settings | None = None) -> None:
    """Apply per-package levels from settings; unset ones reset to NOTSET."""
    settings = settings or get_settings()
    for logger_name, attribute in PACKAGE_LEVEL_SETTINGS.items():
        level = getattr(settings, attribute)
        logging.getLogger(logger_name).setLevel(
            logging.getLevelNamesMapping()[level.upper()] if level else logging.NOTSET
        )


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name.

    Args:
        name: Usually __name__ of the calling module.

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)
