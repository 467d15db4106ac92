"""Logging helpers shared by the uploader modules."""

import logging
from typing import Iterable

ROOT_LOGGER = 'adls_uploader'

PACKAGE_LOGGERS = (
    ROOT_LOGGER,
    'adls_uploader.uploader',
    'adls_uploader.upload.config',
    'adls_uploader.upload.coordinator',
    'adls_uploader.upload.progress',
    'adls_uploader.upload.datalake',
    'adls_uploader.upload.file',
)


def get_logger(name: str) -> logging.Logger:
    """Get a package logger that plays well with basicConfig().

    Names outside the package namespace are placed under it, so
    ``get_logger('upload.queue')`` returns ``adls_uploader.upload.queue``.
    When logging is still unconfigured, a logger without its own level
    starts at WARNING.

    Args:
        name: Logger name, absolute or relative to the package

    Returns:
        Logger instance
    """
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + '.'):
        name = f"{ROOT_LOGGER}.{name}"
    logger = logging.getLogger(name)
    logger.propagate = True

    if not logging.getLogger().handlers and logger.level == logging.NOTSET:
        logger.setLevel(logging.WARNING)

    return logger


def set_level(level, names: Iterable[str] = PACKAGE_LOGGERS) -> None:
    """Set ``level`` on every named logger."""
    for name in names:
        get_logger(name).setLevel(level)
