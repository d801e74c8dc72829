"""Logger providers and a leveled logger taking key/value pairs."""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class LoggerProvider(Protocol):
    """A module that creates loggers for other modules."""

    def logger(self, mod: Any) -> logging.Logger:
        """Return a logger for ``mod``."""


def _format_value(value: Any) -> str:
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(_format_value(item) for item in value) + "]"
    return str(value)


class LeveledLogger:
    """Logs a message followed by its key/value pairs, e.g. ``msg: [key value]``."""

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    @staticmethod
    def _message(msg: str, args: tuple[Any, ...]) -> str:
        return f"{msg}: {_format_value(list(args))}"

    def error(self, msg: str, *args: Any) -> None:
        self._logger.error(self._message(msg, args))

    def warn(self, msg: str, *args: Any) -> None:
        self._logger.warning(self._message(msg, args))

    def info(self, msg: str, *args: Any) -> None:
        self._logger.info(self._message(msg, args))

    def debug(self, msg: str, *args: Any) -> None:
        self._logger.debug(self._message(msg, args))