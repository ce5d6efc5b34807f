"""Logging setup for the BIG-IP IPAM Operator."""

import logging

PACKAGE_LOGGER = "bigip_ipam_operator"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


def parse_log_level(name: str) -> int:
    """Map a level name to a logging level. Raises ValueError if unknown."""
    try:
        return _LEVELS[name.strip().lower()]
    except KeyError:
        raise ValueError(f"unknown log level {name!r}") from None


def configure_logging(level_name: str) -> int:
    """Set the package logger level.

    kopf owns handlers and formatting; only the level is set here. An unknown
    level falls back to warning.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    try:
        level = parse_log_level(level_name)
    except ValueError:
        level = logging.WARNING
        logger.setLevel(level)
        logger.warning(f"unknown log level {level_name}, setting to 'warning'")
        return level

    logger.setLevel(level)
    return level
