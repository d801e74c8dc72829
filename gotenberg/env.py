"""Typed access to environment variables."""

from __future__ import annotations

import os
import re

_DECIMAL_INT = re.compile(r"[+-]?\d+", re.ASCII)


class EnvError(LookupError):
    """Raised when an environment variable is missing, empty or malformed."""


def string_env(key: str) -> str:
    """Return the value of ``key``; it must exist and not be empty."""
    value = os.environ.get(key)
    if value is None:
        raise EnvError(f"environment variable '{key}' does not exist")
    if value == "":
        raise EnvError(f"environment variable '{key}' is empty")
    return value


def int_env(key: str) -> int:
    """Return the value of ``key`` as a decimal integer."""
    value = string_env(key)
    if not _DECIMAL_INT.fullmatch(value):
        raise EnvError(f"get int value of environment variable '{key}': invalid syntax {value!r}")
    return int(value)