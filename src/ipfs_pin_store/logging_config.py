"""Log output of the `ipfs_pin_store` package.

Records are emitted through loguru and are disabled on import, so an application using the
package sees nothing until it opts in with `configure_logger` (or `IPFS_PIN_STORE_LOG_LEVEL`).
Credentials are never logged; addresses and provider names are.
"""

from __future__ import annotations

import contextlib
import sys
from typing import Literal, TextIO

from loguru import logger

PACKAGE_LOGGER_NAME = "ipfs_pin_store"

LogLevel = Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]

_LOG_FORMAT = "<level>{level: <8}</level> | <cyan>{name}</cyan> - <level>{message}</level>"

_handler_id: int | None = None


def _remove_handler() -> None:
    global _handler_id

    if _handler_id is not None:
        # already gone if the application called logger.remove()
        with contextlib.suppress(ValueError):
            logger.remove(_handler_id)
        _handler_id = None


def silence_package_logging() -> None:
    """Stop this package's records from reaching any loguru handler."""
    logger.disable(PACKAGE_LOGGER_NAME)
    _remove_handler()


def configure_logger(level: LogLevel = "WARNING", *, sink: TextIO = sys.stderr) -> int:
    """Enable this package's records and send those at `level` or above to `sink`.

    Calling it again replaces the handler installed by the previous call. Handlers the
    application added itself are left alone and also start receiving the package's records.

    Returns:
        int: The loguru handler id.
    """
    global _handler_id

    _remove_handler()
    logger.enable(PACKAGE_LOGGER_NAME)
    _handler_id = logger.add(
        sink,
        level=level,
        format=_LOG_FORMAT,
        filter=PACKAGE_LOGGER_NAME,
        colorize=False,
    )
    return _handler_id


__all__ = [
    "PACKAGE_LOGGER_NAME",
    "LogLevel",
    "configure_logger",
    "silence_package_logging",
]
